"""Monitor manager — schedules periodic skill scans and update checks."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from clawshield.scanner.engine import SkillScanner
from clawshield.scanner.models import ScanResult
from clawshield.updates.checker import UpdateChecker

logger = logging.getLogger(__name__)


class MonitorManager:
    """Runs the scanner and the update checker on their own intervals.

    Threading model:
    - ``run_loop()`` (usually on the daemon thread started by ``start()``)
      owns the schedule.
    - ``trigger_*`` helpers run one job immediately on a throwaway thread;
      they are not serialized against the scheduled jobs.
    """

    def __init__(
        self,
        scanner: SkillScanner,
        checker: UpdateChecker,
        scan_interval: float = 30 * 60,
        update_interval: float = 4 * 60 * 60,
        on_scan: Callable[[ScanResult], None] | None = None,
        on_update: Callable[[bool], None] | None = None,
    ) -> None:
        self._scanner = scanner
        self._checker = checker
        self._scan_interval = scan_interval
        self._update_interval = update_interval
        self._on_scan = on_scan
        self._on_update = on_update
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def scanner(self) -> SkillScanner:
        return self._scanner

    @property
    def checker(self) -> UpdateChecker:
        return self._checker

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> threading.Thread:
        """Start ``run_loop`` on a daemon thread."""
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run_loop, name="clawshield-monitor", daemon=True
        )
        self._thread.start()
        return self._thread

    def stop(self) -> None:
        """Signal the loop to stop."""
        self._stop_event.set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def run_loop(self) -> None:
        """Blocking scan/check loop until stop()."""
        self._run_scan()
        if self._checker.should_check_for_update():
            self._run_update_check()
        else:
            logger.info("Skipping launch update check — last check is recent")

        now = time.monotonic()
        next_scan = now + self._scan_interval
        next_check = now + self._update_interval

        while not self._stop_event.is_set():
            timeout = max(0.0, min(next_scan, next_check) - time.monotonic())
            if self._stop_event.wait(timeout=timeout):
                break

            now = time.monotonic()
            if now >= next_scan:
                self._run_scan()
                next_scan = time.monotonic() + self._scan_interval
            if now >= next_check:
                self._run_update_check()
                next_check = time.monotonic() + self._update_interval

        logger.info("Monitor loop stopped")

    def trigger_scan(self) -> threading.Thread:
        return self._spawn(self._run_scan, "clawshield-scan")

    def trigger_update_check(self) -> threading.Thread:
        return self._spawn(self._run_update_check, "clawshield-update-check")

    def trigger_install(self) -> threading.Thread:
        return self._spawn(self._run_install, "clawshield-install")

    def _spawn(self, target: Callable[[], None], name: str) -> threading.Thread:
        thread = threading.Thread(target=target, name=name, daemon=True)
        thread.start()
        return thread

    def _run_scan(self) -> None:
        try:
            result = self._scanner.run_scan()
        except Exception:
            logger.exception("Skill scan failed")
            return
        if self._on_scan:
            self._on_scan(result)

    def _run_update_check(self) -> None:
        try:
            available = self._checker.check_for_updates()
        except Exception:
            logger.exception("Update check failed")
            return
        if self._on_update:
            self._on_update(available)

    def _run_install(self) -> None:
        try:
            self._checker.install_update()
        except Exception:
            logger.exception("Update install failed")
            return
        if self._on_update:
            self._on_update(self._checker.has_update)
