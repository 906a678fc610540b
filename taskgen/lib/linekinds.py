"""
Line classification for backlog markdown.

Each line is tagged with exactly one LineKind. Rules are tried in a fixed
order and the first match wins; several rules overlap (a `##` line mentioning
"Features:" is an epic header, not a section marker), so the order matters.
"""

import re
from enum import Enum


class LineKind(Enum):
    EPIC_HEADER = "epic_header"
    FEATURE_SECTION = "feature_section"  # "#### Features:" separator
    FEATURE_ITEM = "feature_item"        # "1. **Name**"
    PROPERTY = "property"                # "- **Effort**: 8 SP"
    BULLET = "bullet"
    TITLE_HEADER = "title_header"        # "# Title"
    BLANK = "blank"
    OTHER = "other"


FEATURE_SECTION_TOKEN = "Features:"
FEATURE_ITEM_RE = re.compile(r'^\d+\.\s*\*\*(.*?)\*\*')
PROPERTY_RE = re.compile(r'^[-*+]\s*\*\*(Effort|Priority|Business Value)\*\*:', re.IGNORECASE)
BULLET_RE = re.compile(r'^[-*+]\s')
TITLE_RE = re.compile(r'^#\s')

# Kinds that end any lookahead started from an earlier line
BOUNDARY_KINDS = frozenset({
    LineKind.EPIC_HEADER,
    LineKind.FEATURE_SECTION,
    LineKind.FEATURE_ITEM,
})


def _is_epic_header(line: str) -> bool:
    # Covers "## Epic: X", "### Epic: X" and any other ## line naming an epic
    return line.startswith("##") and "Epic" in line


def _is_feature_section(line: str) -> bool:
    return line.startswith(f"#### {FEATURE_SECTION_TOKEN}") or FEATURE_SECTION_TOKEN in line


RULES = (
    (LineKind.EPIC_HEADER, _is_epic_header),
    (LineKind.FEATURE_SECTION, _is_feature_section),
    (LineKind.FEATURE_ITEM, lambda line: FEATURE_ITEM_RE.match(line) is not None),
    (LineKind.PROPERTY, lambda line: PROPERTY_RE.match(line) is not None),
    (LineKind.BULLET, lambda line: BULLET_RE.match(line) is not None),
    (LineKind.TITLE_HEADER, lambda line: TITLE_RE.match(line) is not None),
    (LineKind.BLANK, lambda line: not line),
)


def classify_line(line: str) -> LineKind:
    """Return the kind of a single line. Surrounding whitespace is ignored."""
    stripped = line.strip()
    for kind, matches in RULES:
        if matches(stripped):
            return kind
    return LineKind.OTHER


def is_boundary(line: str) -> bool:
    """True if a lookahead must stop before this line."""
    return classify_line(line) in BOUNDARY_KINDS
