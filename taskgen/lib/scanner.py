"""
Context scanning for backlog items.

Given the index of an item's header line, looks a few lines ahead for the
item's attributes: priority, effort (story points), business value and a
free-text description. Every lookahead stops before the next epic header,
feature section marker or numbered feature item. Nothing here raises; a
missing attribute falls back to its default.
"""

import re
from dataclasses import dataclass
from typing import Iterator

from taskgen.lib.linekinds import BULLET_RE, is_boundary
from taskgen.lib.models import Priority, WorkItemKind

# Lookahead sizes, counted from the header line itself.
# Priority and feature descriptions use the short window; effort, business
# value and epic descriptions use the long one.
SHORT_WINDOW = 5
LONG_WINDOW = 10

# Checked in this order on every line; "critical" beats "high" on the same line
PRIORITY_WORDS = (
    ("critical", Priority.CRITICAL),
    ("high", Priority.HIGH),
    ("medium", Priority.MEDIUM),
    ("low", Priority.LOW),
)

# First matching pattern wins, so the labelled form must come before the
# bare "N SP" forms.
EFFORT_PATTERNS = [
    re.compile(r'[-*+]\s*\*\*Effort\*\*:\s*(\d+)(\s*SP)?', re.IGNORECASE),  # - **Effort**: 8 SP
    re.compile(r'[-*+]\s*(\d+)\s*SP\b', re.IGNORECASE),                     # - 8 SP
    re.compile(r'[-*+]\s*(\d+)\s*story\s*points?', re.IGNORECASE),          # - 8 story points
    re.compile(r'(\d+)\s*SP\b', re.IGNORECASE),                             # 8 SP
    re.compile(r'(\d+)\s*story\s*points?', re.IGNORECASE),                  # 8 story points
    re.compile(r'Effort.*?(\d+)', re.IGNORECASE),                           # Effort: 8
]

BUSINESS_VALUE_RE = re.compile(r'(?:\*\*|)Business Value(?:\*\*|):\s*(.+)', re.IGNORECASE)
NUMBERED_RE = re.compile(r'^\d+\.')
BULLET_CHARS = ("-", "*", "+")


@dataclass
class ContextScan:
    """Attributes found around an item's header line."""
    priority: Priority = Priority.MEDIUM
    story_points: int = 0
    business_value: str = ""
    description: str = ""


def _window(lines: list[str], start: int, size: int) -> Iterator[str]:
    """Yield lines[start:start+size], stopping before any boundary line.

    The start line itself is always yielded, even if it is a boundary.
    """
    end = min(start + size, len(lines))
    for i in range(start, end):
        if i > start and is_boundary(lines[i]):
            return
        yield lines[i]


def extract_priority(lines: list[str], start: int) -> Priority:
    for line in _window(lines, start, SHORT_WINDOW):
        lowered = line.lower()
        for word, priority in PRIORITY_WORDS:
            if word in lowered:
                return priority
    return Priority.MEDIUM


def effort_from_line(line: str) -> int:
    """Extract a story point count from one line, or 0."""
    for pattern in EFFORT_PATTERNS:
        match = pattern.search(line)
        if match:
            return int(match.group(1))
    return 0


def extract_effort(lines: list[str], start: int) -> int:
    for line in _window(lines, start, LONG_WINDOW):
        effort = effort_from_line(line)
        if effort > 0:
            return effort
    return 0


def extract_business_value(lines: list[str], start: int) -> str:
    for line in _window(lines, start, LONG_WINDOW):
        match = BUSINESS_VALUE_RE.search(line)
        if match:
            return match.group(1).strip()
    return ""


def extract_epic_description(lines: list[str], start: int) -> str:
    """Prose lines below an epic header, up to the next `#` line."""
    parts = []
    for raw in list(_window(lines, start, LONG_WINDOW))[1:]:
        line = raw.strip()
        if line.startswith("#"):
            break
        if line and not line.startswith(BULLET_CHARS):
            parts.append(line)
    return " ".join(parts)


def extract_feature_description(lines: list[str], start: int) -> str:
    """Prose lines directly below a feature item, up to its first bullet or property."""
    parts = []
    for raw in list(_window(lines, start, SHORT_WINDOW))[1:]:
        line = raw.strip()
        if line.startswith("**Effort**:") or line.startswith(BULLET_CHARS) or NUMBERED_RE.match(line):
            break
        if line:
            parts.append(line)
    return " ".join(parts)


def task_description(line: str) -> str:
    """Text after the bullet marker on a task line."""
    stripped = line.strip()
    if BULLET_RE.match(stripped):
        return stripped[1:].strip()
    return ""


def scan_context(lines: list[str], start: int, kind: WorkItemKind) -> ContextScan:
    """Collect all attributes for an item of `kind` whose header is lines[start]."""
    if kind == WorkItemKind.EPIC:
        return ContextScan(
            priority=extract_priority(lines, start),
            story_points=extract_effort(lines, start),
            business_value=extract_business_value(lines, start),
            description=extract_epic_description(lines, start),
        )
    if kind == WorkItemKind.FEATURE:
        return ContextScan(
            priority=extract_priority(lines, start),
            story_points=extract_effort(lines, start),
            description=extract_feature_description(lines, start),
        )
    # Tasks always default to medium priority; their description is on the same line
    return ContextScan(
        story_points=extract_effort(lines, start),
        description=task_description(lines[start]),
    )
