"""Update checker — compares the installed OpenClaw CLI with npm and installs updates."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

import psutil

from clawshield.actions.base import Notifier
from clawshield.config import ShieldConfig
from clawshield.shell import run_command, sanitize_output
from clawshield.storage.preferences import Preferences
from clawshield.updates.locator import find_cli_candidates, find_npm_path
from clawshield.updates.version import compare_versions

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
NOT_INSTALLED = "Not installed"

_VERSION_TIMEOUT = 5.0
_NPM_SHOW_TIMEOUT = 10.0


@dataclass
class UpdateSnapshot:
    """Point-in-time copy of the checker state."""

    installed_version: str = UNKNOWN
    latest_version: str = UNKNOWN
    is_checking: bool = False
    is_updating: bool = False
    last_check_time: datetime | None = None
    error_message: str | None = None
    update_progress: str = ""
    has_update: bool = False
    gateway_running: bool | None = None


def has_update(installed: str, latest: str) -> bool:
    """True when both versions are known and ``latest`` is newer."""
    if installed in (UNKNOWN, NOT_INSTALLED) or latest == UNKNOWN:
        return False
    return compare_versions(installed, latest) < 0


class UpdateChecker:
    """Tracks the installed and published OpenClaw versions.

    Checks are fire-and-forget from the caller's point of view; all state
    changes go through ``_lock`` so the dashboard can poll ``snapshot()``.
    """

    def __init__(
        self,
        config: ShieldConfig,
        preferences: Preferences,
        notifier: Notifier,
    ) -> None:
        self._config = config
        self._preferences = preferences
        self._notifier = notifier
        self._lock = threading.Lock()
        self._installed_version = UNKNOWN
        self._latest_version = UNKNOWN
        self._is_checking = False
        self._is_updating = False
        self._error_message: str | None = None
        self._update_progress = ""
        self._gateway_running: bool | None = None
        self._last_check_time = preferences.load_last_check()

    @property
    def installed_version(self) -> str:
        with self._lock:
            return self._installed_version

    @property
    def latest_version(self) -> str:
        with self._lock:
            return self._latest_version

    @property
    def error_message(self) -> str | None:
        with self._lock:
            return self._error_message

    @property
    def last_check_time(self) -> datetime | None:
        with self._lock:
            return self._last_check_time

    @property
    def has_update(self) -> bool:
        with self._lock:
            return has_update(self._installed_version, self._latest_version)

    def snapshot(self) -> UpdateSnapshot:
        with self._lock:
            return UpdateSnapshot(
                installed_version=self._installed_version,
                latest_version=self._latest_version,
                is_checking=self._is_checking,
                is_updating=self._is_updating,
                last_check_time=self._last_check_time,
                error_message=self._error_message,
                update_progress=self._update_progress,
                has_update=has_update(self._installed_version, self._latest_version),
                gateway_running=self._gateway_running,
            )

    def is_gateway_running(self) -> bool:
        """Whether an ``openclaw gateway`` process is alive."""
        pattern = self._config.gateway_pattern
        for proc in psutil.process_iter(["cmdline"]):
            try:
                cmdline = " ".join(proc.info.get("cmdline") or ())
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
            if pattern in cmdline:
                return True
        return False

    def should_check_for_update(self, now: datetime | None = None) -> bool:
        with self._lock:
            last = self._last_check_time
        if last is None:
            return True
        interval = timedelta(seconds=self._config.update_check_interval)
        return (now or datetime.now()) - last > interval

    def check_for_updates(self, notify: bool = True) -> bool:
        """Refresh both versions. Returns True if an update is available."""
        with self._lock:
            self._is_checking = True
            self._error_message = None

        try:
            installed = self.get_installed_version()
            with self._lock:
                self._installed_version = installed
            latest = self.get_latest_version()
        finally:
            now = datetime.now()
            with self._lock:
                self._is_checking = False
                self._last_check_time = now
            self._preferences.save_last_check(now)

        with self._lock:
            self._latest_version = latest
            available = has_update(installed, latest)

        logger.info(
            "Update check: installed %s, latest %s%s",
            installed,
            latest,
            " (update available)" if available else "",
        )

        if available and notify:
            if self._notifier.notify_update(installed, latest):
                self.install_update()
        return available

    def install_update(self) -> bool:
        """Install ``<package>@latest`` globally via npm. Returns success."""
        npm = find_npm_path()
        if npm is None:
            self._set_error(
                "npm not found. Install Node.js from nodejs.org or via Homebrew: "
                "brew install node"
            )
            return False

        with self._lock:
            self._is_updating = True
            self._error_message = None
            self._update_progress = "Installing..."

        was_gateway_running = self.is_gateway_running()
        with self._lock:
            self._gateway_running = was_gateway_running
        package = f"{self._config.package_name}@latest"
        logger.info("Installing %s with %s", package, npm)

        try:
            result = run_command(
                npm, ["-g", "install", package], timeout=self._config.install_timeout
            )
        finally:
            with self._lock:
                self._is_updating = False
                self._update_progress = ""

        if result.ok:
            with self._lock:
                self._installed_version = self._latest_version

        self.check_for_updates(notify=False)

        if result.ok:
            if was_gateway_running:
                self._set_error(
                    "Update successful! Gateway was running - restart it to use "
                    "the new version: openclaw gateway restart"
                )
            logger.info("Installed %s", package)
            return True

        lowered = result.output.lower()
        if "eacces" in lowered or "permission denied" in lowered:
            self._set_error(
                "Update requires admin access. Run in Terminal:\n"
                f"sudo npm -g install {package}"
            )
        else:
            self._set_error(f"Update failed: {sanitize_output(result.output)}")
        logger.warning("npm install failed with code %d", result.exit_code)
        return False

    def get_installed_version(self) -> str:
        """Ask each CLI candidate for ``--version``; first success wins."""
        candidates = find_cli_candidates(self._config.cli_name)
        for path in candidates:
            version = self._query_version(path)
            if version is not None:
                return version or UNKNOWN
        logger.debug("No working %s executable among %s", self._config.cli_name, candidates)
        return NOT_INSTALLED

    def get_latest_version(self) -> str:
        """``npm show <package> version``, or UNKNOWN with an error message."""
        npm = find_npm_path()
        if npm is None:
            if self.installed_version == NOT_INSTALLED:
                self._set_error("npm not found. Install from nodejs.org")
            else:
                self._set_error("Cannot check for updates: npm not found")
            return UNKNOWN

        result = run_command(
            npm,
            ["show", self._config.package_name, "version"],
            timeout=_NPM_SHOW_TIMEOUT,
        )
        if not result.ok:
            logger.warning("npm show failed (%d): %s", result.exit_code, sanitize_output(result.output))
            self._set_error("Check failed (offline?)")
            return UNKNOWN

        latest = result.output.strip()
        return latest or UNKNOWN

    def _query_version(self, path: Path) -> str | None:
        result = run_command(path, ["--version"], timeout=_VERSION_TIMEOUT)
        if not result.ok:
            return None
        lines = result.output.strip().splitlines()
        return lines[0].strip() if lines else ""

    def _set_error(self, message: str) -> None:
        with self._lock:
            self._error_message = message
