"""Parse the output of ``monitor-skills.sh --check`` into issues.

The script exits 0 when the installed skills match the baseline and 1 when
they differ, printing one line per change::

    New skills detected:
      + web-search
    Removed skills:
      - calendar
    ✏️  Modified skill: shell-exec
"""

from __future__ import annotations

import logging
from pathlib import Path

from clawshield.scanner.models import Issue, Severity
from clawshield.shell import sanitize_output

logger = logging.getLogger(__name__)

EXIT_NO_CHANGES = 0
EXIT_CHANGES = 1

_ADDED_PREFIX = "+ "
_REMOVED_PREFIX = "- "
_MODIFIED_MARKER = "Modified skill:"

REBASELINE_FIX = "Run: ~/clawd/scripts/monitor-skills.sh --init"
INVESTIGATE_FIX = "Investigate changes, then update baseline"


def parse_monitor_output(output: str, exit_code: int) -> list[Issue]:
    """Turn script output and exit code into a list of issues."""
    if exit_code == EXIT_NO_CHANGES:
        return []
    if exit_code != EXIT_CHANGES:
        return [_failure_issue(output, exit_code)]

    issues: list[Issue] = []
    for raw in output.splitlines():
        issue = _parse_line(raw)
        if issue is not None:
            issues.append(issue)

    logger.debug("Parsed %d change(s) from monitor output", len(issues))
    return issues


def _parse_line(raw: str) -> Issue | None:
    line = raw.strip()

    # Checked first: the modified line may carry an emoji before the marker
    if _MODIFIED_MARKER in line:
        name = line.split(_MODIFIED_MARKER, 1)[1].strip()
        if not name:
            return None
        return Issue(
            title=f"Modified skill: {name}",
            description="Skill content changed since last baseline",
            severity=Severity.CRITICAL,
            suggested_fix=INVESTIGATE_FIX,
        )

    if line.startswith(_ADDED_PREFIX):
        name = line[len(_ADDED_PREFIX) :].strip()
        if not name:
            return None
        return Issue(
            title=f"New skill detected: {name}",
            description="A new skill was added since last baseline",
            severity=Severity.WARNING,
            suggested_fix=REBASELINE_FIX,
        )

    if line.startswith(_REMOVED_PREFIX):
        name = line[len(_REMOVED_PREFIX) :].strip()
        if not name:
            return None
        return Issue(
            title=f"Skill removed: {name}",
            description="A skill was removed since last baseline",
            severity=Severity.WARNING,
            suggested_fix=REBASELINE_FIX,
        )

    return None


def _failure_issue(output: str, exit_code: int) -> Issue:
    excerpt = sanitize_output(output)
    description = f"monitor-skills.sh exited with code {exit_code}"
    if excerpt:
        description += f": {excerpt}"
    return Issue(
        title="Skill check failed",
        description=description,
        severity=Severity.CRITICAL,
        suggested_fix="Run: ~/clawd/scripts/monitor-skills.sh --check",
    )


def count_baseline_skills(path: str | Path) -> int | None:
    """Count non-empty lines in the baseline file, or None if unreadable."""
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Cannot read baseline %s: %s", path, e)
        return None
    return sum(1 for line in text.splitlines() if line.strip())
