"""Shared test fixtures."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from clawshield.config import ShieldConfig
from clawshield.storage.preferences import Preferences


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep every test away from the real ~/.config, ~/.local/share and ~/clawd."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.setenv("CLAWSHIELD_HOME", str(tmp_path / "home-clawd"))
    for name in (
        "CLAWSHIELD_SCRIPTS_DIR",
        "CLAWSHIELD_BASELINE",
        "CLAWSHIELD_SCAN_INTERVAL",
        "CLAWSHIELD_UPDATE_INTERVAL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def openclaw_home(tmp_path: Path) -> Path:
    home = tmp_path / "clawd"
    (home / "scripts").mkdir(parents=True)
    (home / "memory").mkdir(parents=True)
    return home


@pytest.fixture
def config(tmp_path: Path, openclaw_home: Path) -> ShieldConfig:
    return ShieldConfig(
        data_dir=tmp_path / "data",
        config_dir=tmp_path / "config",
        openclaw_home=openclaw_home,
        script_timeout=5.0,
    )


@pytest.fixture
def preferences(config: ShieldConfig) -> Preferences:
    return Preferences(config.preferences_path)


def _write_script(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def write_script():
    """Write an executable /bin/sh script: write_script(path, body)."""
    return _write_script


@pytest.fixture
def write_baseline(config: ShieldConfig):
    """Write the skills baseline: write_baseline([names])."""

    def _write(names: list[str]) -> Path:
        path = config.resolved_baseline_path
        path.write_text("".join(f"{n}\n" for n in names), encoding="utf-8")
        return path

    return _write
