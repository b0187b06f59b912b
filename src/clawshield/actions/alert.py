"""Log notifier — logs available updates and calls an optional callback."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class LogNotifier:
    """Logs update details and optionally asks a callback whether to install."""

    def __init__(self, callback: Callable[[str, str], bool] | None = None) -> None:
        self._callback = callback

    def notify_update(self, installed: str, latest: str) -> bool:
        logger.warning(
            "OpenClaw update available: %s (installed %s)", latest, installed
        )
        if self._callback:
            return bool(self._callback(installed, latest))
        return False
