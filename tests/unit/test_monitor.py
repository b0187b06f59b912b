"""Tests for the monitor manager."""

from __future__ import annotations

from unittest.mock import MagicMock

from clawshield.monitor import MonitorManager
from clawshield.scanner.models import ScanResult


def _manager(scanner: MagicMock, checker: MagicMock, **kwargs) -> MonitorManager:
    return MonitorManager(
        scanner, checker, scan_interval=0.01, update_interval=0.01, **kwargs
    )


def test_initial_scan_and_check_then_periodic():
    scanner = MagicMock()
    checker = MagicMock()
    checker.should_check_for_update.return_value = True
    checker.check_for_updates.return_value = False

    scans: list[ScanResult] = []
    manager = _manager(scanner, checker, on_scan=scans.append)

    def run_scan():
        result = ScanResult(script_path="monitor-skills.sh")
        if scanner.run_scan.call_count >= 3:
            manager.stop()
        return result

    scanner.run_scan.side_effect = run_scan
    manager.run_loop()

    assert scanner.run_scan.call_count >= 3
    assert len(scans) == scanner.run_scan.call_count
    assert checker.check_for_updates.call_count >= 1


def test_recent_check_skips_launch_update():
    scanner = MagicMock()
    checker = MagicMock()
    checker.should_check_for_update.return_value = False

    manager = MonitorManager(scanner, checker, scan_interval=60, update_interval=3600)
    scanner.run_scan.side_effect = lambda: manager.stop()
    manager.run_loop()

    scanner.run_scan.assert_called_once()
    checker.check_for_updates.assert_not_called()


def test_job_failure_does_not_stop_loop():
    scanner = MagicMock()
    checker = MagicMock()
    checker.should_check_for_update.return_value = False
    manager = _manager(scanner, checker)

    def run_scan():
        if scanner.run_scan.call_count >= 2:
            manager.stop()
            return ScanResult(script_path="x")
        raise RuntimeError("boom")

    scanner.run_scan.side_effect = run_scan
    manager.run_loop()
    assert scanner.run_scan.call_count >= 2


def test_start_and_stop_thread():
    scanner = MagicMock()
    checker = MagicMock()
    checker.should_check_for_update.return_value = False
    manager = MonitorManager(scanner, checker, scan_interval=3600, update_interval=3600)

    thread = manager.start()
    assert thread.daemon
    manager.stop()
    manager.join(timeout=5)
    assert not thread.is_alive()
    assert manager.stopped


def test_triggers_run_in_background():
    scanner = MagicMock()
    checker = MagicMock()
    checker.check_for_updates.return_value = True
    checker.has_update = False
    updates: list[bool] = []
    manager = MonitorManager(scanner, checker, on_update=updates.append)

    manager.trigger_scan().join(timeout=5)
    manager.trigger_update_check().join(timeout=5)
    manager.trigger_install().join(timeout=5)

    scanner.run_scan.assert_called_once()
    checker.check_for_updates.assert_called_once()
    checker.install_update.assert_called_once()
    assert updates == [True, False]
