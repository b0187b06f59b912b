"""Semantic-ish version comparison for npm-published OpenClaw releases.

Versions look like ``2026.2.6``, ``2026.2.6-beta.1`` or
``2026.2.6+build.123``. Only the dotted numeric core is compared; a
pre-release tag ranks below the plain release with the same core and
build metadata is ignored entirely.
"""

from __future__ import annotations


def _split(version: str) -> tuple[list[int], bool]:
    core = version.strip().lstrip("vV")
    core = core.split("+", 1)[0]
    core, dash, _prerelease = core.partition("-")

    parts: list[int] = []
    for piece in core.split("."):
        try:
            parts.append(int(piece))
        except ValueError:
            continue
    return parts, bool(dash)


def compare_versions(a: str, b: str) -> int:
    """Return -1 if ``a`` < ``b``, 1 if ``a`` > ``b``, 0 if equal."""
    parts_a, pre_a = _split(a)
    parts_b, pre_b = _split(b)

    for i in range(max(len(parts_a), len(parts_b))):
        left = parts_a[i] if i < len(parts_a) else 0
        right = parts_b[i] if i < len(parts_b) else 0
        if left < right:
            return -1
        if left > right:
            return 1

    if pre_a and not pre_b:
        return -1
    if pre_b and not pre_a:
        return 1
    return 0


def is_newer(candidate: str, current: str) -> bool:
    """True when ``candidate`` is strictly newer than ``current``."""
    return compare_versions(candidate, current) > 0
