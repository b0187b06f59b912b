"""Tests for version comparison."""

from __future__ import annotations

import pytest

from clawshield.updates.version import compare_versions, is_newer


def test_patch_bump_is_newer():
    assert compare_versions("1.2.3", "1.2.4") == -1
    assert compare_versions("1.2.4", "1.2.3") == 1


def test_prerelease_below_release():
    assert compare_versions("1.2.3-beta.1", "1.2.3") == -1
    assert compare_versions("1.2.3", "1.2.3-beta.1") == 1


def test_missing_component_is_zero():
    assert compare_versions("1.2", "1.2.0") == 0


def test_build_metadata_ignored():
    assert compare_versions("2026.2.6+build.123", "2026.2.6") == 0


def test_build_metadata_with_dash_is_not_prerelease():
    assert compare_versions("1.0.0+build-7", "1.0.0") == 0


def test_both_prerelease_equal():
    assert compare_versions("1.0.0-alpha", "1.0.0-rc.2") == 0


def test_prerelease_of_newer_core_wins():
    assert compare_versions("2026.2.7-beta.1", "2026.2.6") == 1


def test_numeric_not_lexicographic():
    assert compare_versions("1.10.0", "1.9.9") == 1


def test_leading_v_and_whitespace():
    assert compare_versions(" v1.2.3\n", "1.2.3") == 0


@pytest.mark.parametrize(
    ("candidate", "current", "expected"),
    [
        ("2026.2.6", "2026.2.5", True),
        ("2026.2.6", "2026.2.6", False),
        ("2026.2.6-beta.1", "2026.2.6", False),
    ],
)
def test_is_newer(candidate: str, current: str, expected: bool):
    assert is_newer(candidate, current) is expected
