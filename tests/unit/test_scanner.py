"""Tests for the skill scanner engine."""

from __future__ import annotations

import threading
from unittest.mock import patch

import pytest

from clawshield.config import ShieldConfig
from clawshield.scanner.engine import SkillScanner
from clawshield.scanner.models import SecurityStatus, Severity
from clawshield.shell import CommandResult


def test_missing_script_yields_one_critical(config: ShieldConfig):
    scanner = SkillScanner(config)
    result = scanner.run_scan()

    critical = result.by_severity(Severity.CRITICAL)
    assert len(critical) == 1
    assert critical[0].title == "Monitor script not found"
    assert str(config.resolved_monitor_script) in (critical[0].description or "")
    assert scanner.is_scanning is False
    assert len(scanner.critical_issues) == 1
    assert scanner.current_status == SecurityStatus.CRITICAL


def test_clean_scan_is_safe(config: ShieldConfig, write_script, write_baseline):
    write_script(config.resolved_monitor_script, 'echo "No changes"\nexit 0')
    write_baseline(["alpha", "beta"])

    scanner = SkillScanner(config)
    result = scanner.run_scan()

    assert result.issues == []
    assert result.exit_code == 0
    assert result.skills_tracked == 2
    assert scanner.current_status == SecurityStatus.SAFE
    assert scanner.last_scan_time is not None


def test_changes_are_categorized(config: ShieldConfig, write_script, write_baseline):
    write_script(
        config.resolved_monitor_script,
        'echo "New skills detected:"\n'
        'echo "  + foo"\n'
        'echo "Modified skill: bar"\n'
        "exit 1",
    )
    write_baseline(["bar"])

    scanner = SkillScanner(config)
    scanner.run_scan()

    snap = scanner.snapshot()
    assert [i.title for i in snap.warning_issues] == ["New skill detected: foo"]
    assert [i.title for i in snap.critical_issues] == ["Modified skill: bar"]
    assert snap.status == SecurityStatus.CRITICAL
    assert snap.skills_tracked == 1


def test_script_receives_check_flag(config: ShieldConfig, write_script, write_baseline):
    write_script(
        config.resolved_monitor_script,
        'if [ "$1" = "--check" ]; then exit 0; fi\necho "+ wrong-flag"\nexit 1',
    )
    write_baseline([])

    result = SkillScanner(config).run_scan()
    assert result.issues == []


def test_unexpected_exit_code(config: ShieldConfig, write_script, write_baseline):
    write_script(config.resolved_monitor_script, 'echo "baseline corrupt" >&2\nexit 3')
    write_baseline(["a"])

    result = SkillScanner(config).run_scan()
    assert len(result.issues) == 1
    assert result.issues[0].severity == Severity.CRITICAL
    assert "baseline corrupt" in (result.issues[0].description or "")


def test_timeout_is_reported(config: ShieldConfig, write_script, write_baseline):
    write_script(config.resolved_monitor_script, "exit 0")
    write_baseline(["a"])

    timed_out = CommandResult(
        output="Command timed out after 5 seconds", exit_code=-1, timed_out=True
    )
    with patch("clawshield.scanner.engine.run_command", return_value=timed_out):
        scanner = SkillScanner(config)
        result = scanner.run_scan()

    assert [i.title for i in result.issues] == ["Skill check timed out"]
    assert scanner.is_scanning is False


def test_missing_baseline_is_info_only(config: ShieldConfig, write_script):
    write_script(config.resolved_monitor_script, "exit 0")

    scanner = SkillScanner(config)
    result = scanner.run_scan()

    assert [i.severity for i in result.issues] == [Severity.INFO]
    assert scanner.current_status == SecurityStatus.SAFE
    assert scanner.skills_tracked == 0


def test_rescan_replaces_previous_issues(config: ShieldConfig, write_script, write_baseline):
    script = write_script(config.resolved_monitor_script, 'echo "+ foo"\nexit 1')
    write_baseline(["a"])

    scanner = SkillScanner(config)
    scanner.run_scan()
    scanner.run_scan()
    assert len(scanner.warning_issues) == 1

    write_script(script, "exit 0")
    scanner.run_scan()
    assert scanner.warning_issues == []
    assert scanner.current_status == SecurityStatus.SAFE


def test_status_unknown_before_first_scan(config: ShieldConfig):
    scanner = SkillScanner(config)
    assert scanner.current_status == SecurityStatus.UNKNOWN
    assert scanner.snapshot().last_scan_time is None


def test_is_scanning_during_scan(config: ShieldConfig, write_script, write_baseline):
    write_baseline([])
    started = threading.Event()
    release = threading.Event()
    scanner = SkillScanner(config)

    def slow_run(*args, **kwargs):
        started.set()
        release.wait(timeout=5)
        return CommandResult(output="", exit_code=0)

    write_script(config.resolved_monitor_script, "exit 0")
    with patch("clawshield.scanner.engine.run_command", side_effect=slow_run):
        thread = threading.Thread(target=scanner.run_scan)
        thread.start()
        assert started.wait(timeout=5)
        assert scanner.is_scanning is True
        release.set()
        thread.join(timeout=5)

    assert scanner.is_scanning is False


def test_failure_inside_scan_still_clears_flag(config: ShieldConfig, write_script):
    write_script(config.resolved_monitor_script, "exit 0")
    scanner = SkillScanner(config)

    with patch(
        "clawshield.scanner.engine.parse_monitor_output", side_effect=RuntimeError("boom")
    ):
        with pytest.raises(RuntimeError):
            scanner.run_scan()

    assert scanner.is_scanning is False
