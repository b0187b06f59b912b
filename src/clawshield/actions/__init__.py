"""User-facing notifications for available updates."""

from clawshield.actions.alert import LogNotifier
from clawshield.actions.base import Notifier
from clawshield.actions.dialog import DialogNotifier, default_notifier

__all__ = ["DialogNotifier", "LogNotifier", "Notifier", "default_notifier"]
