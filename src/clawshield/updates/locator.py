"""Locate npm and the OpenClaw CLI across Homebrew, system and nvm installs."""

from __future__ import annotations

import logging
import re
import shutil
from functools import cmp_to_key
from pathlib import Path

from clawshield.updates.version import compare_versions

logger = logging.getLogger(__name__)

SYSTEM_BIN_DIRS = (
    Path("/usr/local/bin"),
    Path("/opt/homebrew/bin"),
    Path("/usr/bin"),
)

# nvm keeps one directory per Node version, e.g. ~/.nvm/versions/node/v22.0.0
_NODE_VERSION_RE = re.compile(r"^v?\d+\.\d+\.\d+$")
_by_version = cmp_to_key(compare_versions)


def nvm_bin_dirs(home: Path | None = None) -> list[Path]:
    """nvm ``bin`` directories, newest Node version first."""
    base = (home or Path.home()) / ".nvm" / "versions" / "node"
    try:
        entries = [p for p in base.iterdir() if p.is_dir()]
    except OSError:
        return []

    versions = [p for p in entries if _NODE_VERSION_RE.match(p.name)]
    skipped = len(entries) - len(versions)
    if skipped:
        logger.debug("Skipped %d non-version entries in %s", skipped, base)

    ordered = sorted(versions, key=lambda p: _by_version(p.name), reverse=True)
    return [p / "bin" for p in ordered]


def find_npm_path(
    home: Path | None = None,
    system_dirs: tuple[Path, ...] = SYSTEM_BIN_DIRS,
) -> Path | None:
    """Return the first npm executable found, or None."""
    for directory in system_dirs:
        candidate = directory / "npm"
        if candidate.is_file():
            return candidate

    for directory in nvm_bin_dirs(home):
        candidate = directory / "npm"
        if candidate.is_file():
            return candidate

    found = shutil.which("npm")
    return Path(found) if found else None


def find_cli_candidates(
    name: str = "openclaw",
    home: Path | None = None,
    system_dirs: tuple[Path, ...] = SYSTEM_BIN_DIRS[:2],
) -> list[Path]:
    """All existing executables named ``name``, in lookup order, de-duplicated."""
    candidates = [d / name for d in system_dirs]
    candidates.extend(d / name for d in nvm_bin_dirs(home))
    found = shutil.which(name)
    if found:
        candidates.append(Path(found))

    seen: set[Path] = set()
    result: list[Path] = []
    for path in candidates:
        if path in seen or not path.is_file():
            continue
        seen.add(path)
        result.append(path)
    return result

