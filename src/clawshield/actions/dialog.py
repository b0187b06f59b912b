"""macOS dialog notifier — asks via osascript whether to update now."""

from __future__ import annotations

import logging
import platform
import shutil

from clawshield.actions.alert import LogNotifier
from clawshield.actions.base import LATER, UPDATE_NOW, Notifier
from clawshield.shell import run_command

logger = logging.getLogger(__name__)

_TITLE = "OpenClaw Update Available"
_GIVE_UP_AFTER = 60


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


class DialogNotifier:
    """Shows a two-button dialog ("Later" / "Update Now") through AppleScript."""

    def __init__(self, osascript: str | None = None) -> None:
        self._osascript = osascript or shutil.which("osascript") or "/usr/bin/osascript"

    def notify_update(self, installed: str, latest: str) -> bool:
        body = f"Version {latest} is now available (you have {installed})"
        script = (
            f'display dialog "{_escape(body)}" '
            f'with title "{_escape(_TITLE)}" '
            f'buttons {{"{LATER}", "{UPDATE_NOW}"}} '
            f'default button "{UPDATE_NOW}" '
            f"giving up after {_GIVE_UP_AFTER}"
        )
        result = run_command(
            self._osascript, ["-e", script], timeout=_GIVE_UP_AFTER + 5
        )
        if not result.ok:
            # Exit 1 also covers the user closing the dialog
            logger.info("Update dialog dismissed or failed: %s", result.output.strip())
            return False
        return f"button returned:{UPDATE_NOW}" in result.output


def default_notifier() -> Notifier:
    """Dialog notifier on macOS, log-only notifier elsewhere."""
    if platform.system() == "Darwin":
        return DialogNotifier()
    return LogNotifier()
