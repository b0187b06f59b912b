"""Scanner data models — issues, overall status and scan results."""

from __future__ import annotations

import enum
import time
import uuid
from dataclasses import dataclass, field


class Severity(enum.Enum):
    """Issue severity level."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class SecurityStatus(enum.Enum):
    """Overall state shown in the dashboard header."""

    SAFE = "safe"
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @property
    def glyph(self) -> str:
        return _STATUS_GLYPHS[self]

    @property
    def color(self) -> str:
        return _STATUS_COLORS[self]


_STATUS_LABELS = {
    SecurityStatus.SAFE: "Secure",
    SecurityStatus.WARNING: "Review Needed",
    SecurityStatus.CRITICAL: "Action Required",
    SecurityStatus.UNKNOWN: "Unknown",
}

_STATUS_GLYPHS = {
    SecurityStatus.SAFE: "✔",
    SecurityStatus.WARNING: "⚠",
    SecurityStatus.CRITICAL: "✖",
    SecurityStatus.UNKNOWN: "?",
}

_STATUS_COLORS = {
    SecurityStatus.SAFE: "green",
    SecurityStatus.WARNING: "yellow",
    SecurityStatus.CRITICAL: "red",
    SecurityStatus.UNKNOWN: "dim",
}


@dataclass
class Issue:
    """A single finding surfaced to the user."""

    title: str
    severity: Severity
    description: str | None = None
    suggested_fix: str | None = None
    can_auto_fix: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])


@dataclass
class ScanResult:
    """Aggregate result of one skills scan."""

    script_path: str
    issues: list[Issue] = field(default_factory=list)
    skills_tracked: int = 0
    exit_code: int | None = None
    duration: float = 0.0
    timestamp: float = field(default_factory=time.time)

    def by_severity(self, severity: Severity) -> list[Issue]:
        return [i for i in self.issues if i.severity == severity]

    @property
    def status(self) -> SecurityStatus:
        return status_for(self.issues)


def status_for(issues: list[Issue]) -> SecurityStatus:
    """Critical beats warning beats safe; info issues never raise the status."""
    severities = {i.severity for i in issues}
    if Severity.CRITICAL in severities:
        return SecurityStatus.CRITICAL
    if Severity.WARNING in severities:
        return SecurityStatus.WARNING
    return SecurityStatus.SAFE
