"""Per-user preferences stored as a small YAML document."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

LAST_CHECK_KEY = "last_update_check"


class Preferences:
    """Read/write access to ``preferences.yaml``.

    Unreadable or corrupt files behave like an empty document; write errors
    are logged and swallowed so a read-only home never breaks a check.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict:
        if not self._path.is_file():
            return {}
        try:
            data = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError):
            logger.warning("Ignoring unreadable preferences %s", self._path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed preferences %s", self._path)
            return {}
        return data

    def save(self, data: dict) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                yaml.dump(data, default_flow_style=False, sort_keys=False),
                encoding="utf-8",
            )
        except OSError:
            logger.warning("Failed to save preferences %s", self._path, exc_info=True)
            return
        logger.debug("Saved preferences to %s", self._path)

    def load_last_check(self) -> datetime | None:
        raw = self.load().get(LAST_CHECK_KEY)
        if isinstance(raw, datetime):
            return raw
        if not raw:
            return None
        try:
            return datetime.fromisoformat(str(raw))
        except ValueError:
            logger.warning("Ignoring invalid %s value %r", LAST_CHECK_KEY, raw)
            return None

    def save_last_check(self, when: datetime) -> None:
        data = self.load()
        data[LAST_CHECK_KEY] = when.isoformat()
        self.save(data)
