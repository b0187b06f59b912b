"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from clawshield.config import ShieldConfig


def test_defaults_derive_from_home(tmp_path: Path):
    config = ShieldConfig(openclaw_home=tmp_path / "clawd")
    assert config.resolved_scripts_dir == tmp_path / "clawd" / "scripts"
    assert config.resolved_monitor_script == tmp_path / "clawd" / "scripts" / "monitor-skills.sh"
    assert config.resolved_baseline_path == tmp_path / "clawd" / "memory" / "skills-baseline.txt"
    assert config.scan_interval == 1800
    assert config.update_check_interval == 14400


def test_xdg_dirs(tmp_path: Path):
    config = ShieldConfig.load()
    assert config.data_dir == tmp_path / "xdg-data" / "clawshield"
    assert config.config_dir == tmp_path / "xdg-config" / "clawshield"
    assert config.preferences_path == config.data_dir / "preferences.yaml"


def test_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CLAWSHIELD_HOME", str(tmp_path / "oc"))
    monkeypatch.setenv("CLAWSHIELD_SCRIPTS_DIR", str(tmp_path / "bin"))
    monkeypatch.setenv("CLAWSHIELD_SCAN_INTERVAL", "60")
    monkeypatch.setenv("CLAWSHIELD_UPDATE_INTERVAL", "120.5")

    config = ShieldConfig.load()
    assert config.openclaw_home == tmp_path / "oc"
    assert config.resolved_monitor_script == tmp_path / "bin" / "monitor-skills.sh"
    assert config.resolved_baseline_path == tmp_path / "oc" / "memory" / "skills-baseline.txt"
    assert config.scan_interval == 60.0
    assert config.update_check_interval == 120.5


def test_baseline_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CLAWSHIELD_BASELINE", str(tmp_path / "b.txt"))
    assert ShieldConfig.load().resolved_baseline_path == tmp_path / "b.txt"


def test_config_yaml_then_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    config_dir = tmp_path / "xdg-config" / "clawshield"
    config_dir.mkdir(parents=True)
    (config_dir / "config.yaml").write_text(
        "openclaw_home: /srv/clawd\n"
        "scan_interval: 600\n"
        "package_name: openclaw-nightly\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("CLAWSHIELD_SCAN_INTERVAL", "90")
    monkeypatch.delenv("CLAWSHIELD_HOME")

    config = ShieldConfig.load()
    assert config.openclaw_home == Path("/srv/clawd")
    assert config.package_name == "openclaw-nightly"
    assert config.scan_interval == 90.0


def test_invalid_interval_raises(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CLAWSHIELD_SCAN_INTERVAL", "soon")
    with pytest.raises(ValueError, match="CLAWSHIELD_SCAN_INTERVAL"):
        ShieldConfig.load()


def test_non_positive_interval_raises():
    with pytest.raises(ValueError):
        ShieldConfig().apply_mapping({"update_check_interval": 0})


def test_non_mapping_yaml_raises():
    with pytest.raises(ValueError, match="mapping"):
        ShieldConfig().apply_mapping(["a", "b"])


def test_malformed_yaml_raises(tmp_path: Path):
    config_dir = tmp_path / "xdg-config" / "clawshield"
    config_dir.mkdir(parents=True)
    (config_dir / "config.yaml").write_text("scan_interval: [1, 2\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid"):
        ShieldConfig.load()
