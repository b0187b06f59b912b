"""Notifier protocol — how an available update is presented to the user."""

from __future__ import annotations

from typing import Protocol

UPDATE_NOW = "Update Now"
LATER = "Later"


class Notifier(Protocol):
    """Protocol for update notifications."""

    def notify_update(self, installed: str, latest: str) -> bool:
        """Announce an update. Returns True if the user chose "Update Now"."""
        ...
