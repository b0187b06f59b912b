"""Global configuration — XDG paths, OpenClaw paths, env vars, defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _default_data_dir() -> Path:
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / "clawshield"
    return Path.home() / ".local" / "share" / "clawshield"


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "clawshield"
    return Path.home() / ".config" / "clawshield"


def _default_openclaw_home() -> Path:
    return Path.home() / "clawd"


_PATH_KEYS = ("openclaw_home", "scripts_dir", "monitor_script", "baseline_path")
_FLOAT_KEYS = (
    "scan_interval",
    "update_check_interval",
    "script_timeout",
    "install_timeout",
)
_STR_KEYS = ("package_name", "cli_name", "gateway_pattern")

_ENV_PATHS = {
    "CLAWSHIELD_HOME": "openclaw_home",
    "CLAWSHIELD_SCRIPTS_DIR": "scripts_dir",
    "CLAWSHIELD_BASELINE": "baseline_path",
}
_ENV_FLOATS = {
    "CLAWSHIELD_SCAN_INTERVAL": "scan_interval",
    "CLAWSHIELD_UPDATE_INTERVAL": "update_check_interval",
}


@dataclass
class ShieldConfig:
    """Application-wide configuration.

    ``scripts_dir``, ``monitor_script`` and ``baseline_path`` default to
    locations under ``openclaw_home`` when left unset.
    """

    data_dir: Path = field(default_factory=_default_data_dir)
    config_dir: Path = field(default_factory=_default_config_dir)
    openclaw_home: Path = field(default_factory=_default_openclaw_home)
    scripts_dir: Path | None = None
    monitor_script: Path | None = None
    baseline_path: Path | None = None
    scan_interval: float = 30 * 60
    update_check_interval: float = 4 * 60 * 60
    script_timeout: float = 30.0
    install_timeout: float = 300.0
    package_name: str = "openclaw"
    cli_name: str = "openclaw"
    gateway_pattern: str = "openclaw gateway"
    verbose: bool = False

    @property
    def resolved_scripts_dir(self) -> Path:
        return self.scripts_dir or self.openclaw_home / "scripts"

    @property
    def resolved_monitor_script(self) -> Path:
        return self.monitor_script or self.resolved_scripts_dir / "monitor-skills.sh"

    @property
    def resolved_baseline_path(self) -> Path:
        return self.baseline_path or (
            self.openclaw_home / "memory" / "skills-baseline.txt"
        )

    @property
    def preferences_path(self) -> Path:
        return self.data_dir / "preferences.yaml"

    @classmethod
    def load(cls) -> ShieldConfig:
        """Load config from config.yaml and environment variables."""
        config = cls()

        config_file = config.config_dir / "config.yaml"
        if config_file.is_file():
            try:
                data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid {config_file}: {e}") from e
            config.apply_mapping(data or {})

        for env_name, attr in _ENV_PATHS.items():
            value = os.environ.get(env_name)
            if value:
                setattr(config, attr, Path(value).expanduser())

        for env_name, attr in _ENV_FLOATS.items():
            value = os.environ.get(env_name)
            if value:
                setattr(config, attr, _parse_seconds(env_name, value))

        return config

    def apply_mapping(self, data: object) -> None:
        """Apply settings from a parsed config.yaml mapping."""
        if not isinstance(data, dict):
            raise ValueError("Config YAML must be a mapping")

        for key in _PATH_KEYS:
            if data.get(key):
                setattr(self, key, Path(str(data[key])).expanduser())
        for key in _FLOAT_KEYS:
            if data.get(key) is not None:
                setattr(self, key, _parse_seconds(key, data[key]))
        for key in _STR_KEYS:
            if data.get(key):
                setattr(self, key, str(data[key]))


def _parse_seconds(name: str, value: object) -> float:
    try:
        seconds = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number of seconds, got {value!r}") from None
    if seconds <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return seconds
