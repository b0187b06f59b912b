"""Single-key terminal input for the dashboard (cbreak mode, non-blocking)."""

from __future__ import annotations

import os
import selectors
import sys
import termios
import tty
from types import TracebackType

# Bytes following ESC for the arrow keys
_ARROWS = {
    "[A": "up",
    "[B": "down",
    "[C": "right",
    "[D": "left",
}

_NAMED = {
    "\t": "tab",
    "\r": "enter",
    "\n": "enter",
}


class KeyReader:
    """Context manager yielding one named key per ``read()`` call.

    Reads go through ``os.read`` on the stdin descriptor, one byte at a
    time, so the selector never disagrees with a buffered ``sys.stdin``.

    Usage::

        with KeyReader() as keys:
            key = keys.read(timeout=0.1)  # "q", "tab", "up", ... or None
    """

    def __init__(self, fd: int | None = None) -> None:
        self._fd = sys.stdin.fileno() if fd is None else fd
        self._selector = selectors.DefaultSelector()
        self._saved: list | None = None

    def __enter__(self) -> KeyReader:
        self._saved = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        self._selector.register(self._fd, selectors.EVENT_READ)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._selector.unregister(self._fd)
        self._selector.close()
        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)

    def read(self, timeout: float = 0.1) -> str | None:
        """Return the next key name, or None if nothing arrived in time."""
        if not self._selector.select(timeout=timeout):
            return None

        ch = self._next_char()
        if ch == "\x1b":
            return self._escape_sequence()
        return _NAMED.get(ch, ch)

    def _next_char(self) -> str:
        return os.read(self._fd, 1).decode("utf-8", errors="replace")

    def _escape_sequence(self) -> str:
        seq = ""
        while len(seq) < 2 and self._selector.select(timeout=0.02):
            seq += self._next_char()
        return _ARROWS.get(seq, "escape")
