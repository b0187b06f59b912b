"""Dashboard application — Rich Live loop wired to the monitor manager."""

from __future__ import annotations

import logging
import os
import signal
import sys

from rich.console import Console
from rich.live import Live

from clawshield.monitor import MonitorManager
from clawshield.tui.display import DashboardDisplay
from clawshield.tui.input import KeyReader
from clawshield.tui.state import DashboardState, ViewMode

logger = logging.getLogger(__name__)

_SCROLL_STEP = 1


class DashboardApp:
    """Interactive status dashboard.

    Threading model:
    - Main thread: keyboard input + Rich Live rendering (this class)
    - Daemon thread: MonitorManager.run_loop() (started by caller)
    - Short-lived threads: rescans, update checks and installs triggered by keys
    """

    def __init__(self, state: DashboardState, manager: MonitorManager) -> None:
        self._state = state
        self._manager = manager
        self._display = DashboardDisplay()
        self._console = Console(stderr=True)

    def run(self) -> None:
        """Run the render loop. Blocks until quit or the monitor stops."""
        state = self._state

        original_sigint = signal.getsignal(signal.SIGINT)
        original_sigterm = signal.getsignal(signal.SIGTERM)

        def _signal_handler(signum: int, frame: object) -> None:
            state.running = False
            self._manager.stop()

        signal.signal(signal.SIGINT, _signal_handler)
        signal.signal(signal.SIGTERM, _signal_handler)

        try:
            with KeyReader() as keys:
                with Live(
                    console=self._console,
                    screen=True,
                    refresh_per_second=4,
                ) as live:
                    while state.running:
                        key = keys.read(timeout=0.1)
                        if key is not None:
                            self.dispatch_key(key)

                        size = os.get_terminal_size(sys.stderr.fileno())
                        live.update(
                            self._display.render(
                                state, height=size.lines, width=size.columns
                            )
                        )

                        if self._manager.stopped:
                            state.running = False
        except Exception:
            logger.exception("Dashboard error")
        finally:
            signal.signal(signal.SIGINT, original_sigint)
            signal.signal(signal.SIGTERM, original_sigterm)

    def dispatch_key(self, key: str) -> None:
        state = self._state

        if key == "q":
            state.running = False
            self._manager.stop()
            return

        if state.mode == ViewMode.HELP:
            # Any key leaves help
            state.mode = ViewMode.OVERVIEW
            return

        if key == "?":
            state.mode = ViewMode.HELP
        elif key == "escape":
            state.mode = ViewMode.OVERVIEW
        elif key == "tab":
            state.toggle_updates()
        elif key == "r":
            self._rescan()
        elif key == "c":
            self._check_updates()
        elif key == "u":
            self._install()
        elif key in ("j", "down"):
            state.scroll(_SCROLL_STEP, self._display.line_count(state))
        elif key in ("k", "up"):
            state.scroll(-_SCROLL_STEP, self._display.line_count(state))

    def _rescan(self) -> None:
        self._manager.trigger_scan()
        self._state.scroll_offset = 0
        self._state.set_status("Scanning skills...")

    def _check_updates(self) -> None:
        self._manager.trigger_update_check()
        self._state.set_status("Checking for updates...")

    def _install(self) -> None:
        update = self._manager.checker.snapshot()
        if update.is_updating:
            self._state.set_status("Update already in progress")
            return
        if not update.has_update:
            self._state.set_status("No update available")
            return
        self._manager.trigger_install()
        self._state.mode = ViewMode.UPDATES
        self._state.set_status(f"Installing OpenClaw {update.latest_version}...")
