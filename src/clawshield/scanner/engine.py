"""Skill scanner — runs the monitor script and holds the latest scan state."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime

from clawshield.config import ShieldConfig
from clawshield.scanner.models import (
    Issue,
    ScanResult,
    SecurityStatus,
    Severity,
    status_for,
)
from clawshield.scanner.parser import (
    REBASELINE_FIX,
    count_baseline_skills,
    parse_monitor_output,
)
from clawshield.shell import run_command

logger = logging.getLogger(__name__)


@dataclass
class ScanSnapshot:
    """Point-in-time copy of the scanner state, safe to read from any thread."""

    is_scanning: bool = False
    status: SecurityStatus = SecurityStatus.UNKNOWN
    critical_issues: list[Issue] = field(default_factory=list)
    warning_issues: list[Issue] = field(default_factory=list)
    info_issues: list[Issue] = field(default_factory=list)
    skills_tracked: int = 0
    last_scan_time: datetime | None = None

    @property
    def has_issues(self) -> bool:
        return bool(self.critical_issues or self.warning_issues)


class SkillScanner:
    """Runs ``monitor-skills.sh --check`` and keeps the categorized issues.

    Every scan discards the previous issues and rebuilds them. Scans are not
    serialized against each other; state updates are lock-guarded so readers
    always see one complete scan.
    """

    def __init__(self, config: ShieldConfig) -> None:
        self._config = config
        self._lock = threading.Lock()
        self._is_scanning = False
        self._status = SecurityStatus.UNKNOWN
        self._issues: list[Issue] = []
        self._skills_tracked = 0
        self._last_scan_time: datetime | None = None

    @property
    def is_scanning(self) -> bool:
        with self._lock:
            return self._is_scanning

    @property
    def current_status(self) -> SecurityStatus:
        with self._lock:
            return self._status

    @property
    def critical_issues(self) -> list[Issue]:
        return self._filtered(Severity.CRITICAL)

    @property
    def warning_issues(self) -> list[Issue]:
        return self._filtered(Severity.WARNING)

    @property
    def info_issues(self) -> list[Issue]:
        return self._filtered(Severity.INFO)

    @property
    def skills_tracked(self) -> int:
        with self._lock:
            return self._skills_tracked

    @property
    def last_scan_time(self) -> datetime | None:
        with self._lock:
            return self._last_scan_time

    def run_scan(self) -> ScanResult:
        """Run one scan synchronously and publish its result."""
        script = self._config.resolved_monitor_script
        with self._lock:
            self._is_scanning = True
            self._issues = []

        start = time.time()
        result = ScanResult(script_path=str(script))
        try:
            result.issues.extend(self._check_skill_changes(result))
            result.skills_tracked = self._count_skills(result)
        finally:
            result.duration = time.time() - start
            with self._lock:
                self._issues = list(result.issues)
                self._skills_tracked = result.skills_tracked
                self._last_scan_time = datetime.now()
                self._status = status_for(result.issues)
                self._is_scanning = False

        logger.info(
            "Scan finished in %.2fs: %d issue(s), status %s",
            result.duration,
            len(result.issues),
            result.status.value,
        )
        return result

    def snapshot(self) -> ScanSnapshot:
        with self._lock:
            issues = list(self._issues)
            return ScanSnapshot(
                is_scanning=self._is_scanning,
                status=self._status,
                critical_issues=[i for i in issues if i.severity == Severity.CRITICAL],
                warning_issues=[i for i in issues if i.severity == Severity.WARNING],
                info_issues=[i for i in issues if i.severity == Severity.INFO],
                skills_tracked=self._skills_tracked,
                last_scan_time=self._last_scan_time,
            )

    def _check_skill_changes(self, result: ScanResult) -> list[Issue]:
        script = self._config.resolved_monitor_script
        if not script.is_file():
            logger.warning("Monitor script not found at %s", script)
            return [
                Issue(
                    title="Monitor script not found",
                    description=f"monitor-skills.sh not found at {script}",
                    severity=Severity.CRITICAL,
                )
            ]

        command = run_command(
            script, ["--check"], timeout=self._config.script_timeout
        )
        result.exit_code = command.exit_code

        if command.timed_out:
            return [
                Issue(
                    title="Skill check timed out",
                    description=command.output,
                    severity=Severity.CRITICAL,
                    suggested_fix=f"Run {script} --check manually to investigate",
                )
            ]
        return parse_monitor_output(command.output, command.exit_code)

    def _count_skills(self, result: ScanResult) -> int:
        baseline = self._config.resolved_baseline_path
        count = count_baseline_skills(baseline)
        if count is not None:
            return count

        result.issues.append(
            Issue(
                title="Skills baseline not found",
                description=f"Cannot read {baseline}",
                severity=Severity.INFO,
                suggested_fix=REBASELINE_FIX,
            )
        )
        with self._lock:
            return self._skills_tracked

    def _filtered(self, severity: Severity) -> list[Issue]:
        with self._lock:
            return [i for i in self._issues if i.severity == severity]
