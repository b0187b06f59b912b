"""Dashboard state shared between the monitor threads and the render loop."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass

from clawshield.scanner.engine import ScanSnapshot, SkillScanner
from clawshield.updates.checker import UpdateChecker, UpdateSnapshot


class ViewMode(enum.Enum):
    """Which view the dashboard is currently showing."""

    OVERVIEW = "overview"
    UPDATES = "updates"
    HELP = "help"


@dataclass
class DashboardState:
    """Render-thread state plus handles on the lock-guarded scanner/checker.

    Scan and update data are never copied here; ``snapshot()`` pulls a
    consistent view from each owner on every frame.
    """

    scanner: SkillScanner
    checker: UpdateChecker

    # --- Render-thread only (no lock needed) ---
    mode: ViewMode = ViewMode.OVERVIEW
    running: bool = True
    scroll_offset: int = 0
    status_message: str = ""
    _status_expiry: float = 0.0

    def snapshot(self) -> tuple[ScanSnapshot, UpdateSnapshot]:
        return self.scanner.snapshot(), self.checker.snapshot()

    def toggle_updates(self) -> None:
        if self.mode == ViewMode.UPDATES:
            self.mode = ViewMode.OVERVIEW
        else:
            self.mode = ViewMode.UPDATES

    def scroll(self, delta: int, total: int) -> None:
        """Move the issue list viewport, clamped to ``[0, total - 1]``."""
        self.scroll_offset = max(0, min(self.scroll_offset + delta, max(0, total - 1)))

    def set_status(self, message: str, duration: float = 3.0) -> None:
        self.status_message = message
        self._status_expiry = time.time() + duration

    def current_status(self) -> str:
        """Status message if still fresh, else empty (and cleared)."""
        if self.status_message and time.time() < self._status_expiry:
            return self.status_message
        self.status_message = ""
        return ""
