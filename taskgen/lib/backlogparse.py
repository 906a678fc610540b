"""
Backlog markdown parser.

Builds an Epic -> Feature -> Task tree from a loosely formatted markdown
backlog. The parse is a single forward pass over classified lines with two
cursors (current epic, current feature); attributes for each new item come
from a short lookahead (see scanner.py).

Parsing is best-effort: malformed input degrades to default values and never
raises. The only error is a missing input file.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from taskgen.lib.linekinds import BOUNDARY_KINDS, FEATURE_ITEM_RE, TITLE_RE, LineKind, classify_line
from taskgen.lib.models import Document, Priority, TaskNode, WorkItemKind, new_node
from taskgen.lib.scanner import SHORT_WINDOW, effort_from_line, scan_context

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".md", ".markdown", ".txt")
DEFAULT_TITLE = "Development Tasks"

EPIC_PREFIX_RE = re.compile(r'^#+\s*(?:Epic:\s*)?')
BULLET_PREFIX_RE = re.compile(r'^[-*+]\s*')


@dataclass
class ParserState:
    """Mutable state of one parse. Never shared between parses."""
    roots: list[TaskNode] = field(default_factory=list)
    nodes: dict[str, TaskNode] = field(default_factory=dict)
    current_epic: Optional[TaskNode] = None
    current_feature: Optional[TaskNode] = None

    def add_root(self, node: TaskNode) -> None:
        node.parent_id = None
        self.roots.append(node)
        self.nodes[node.id] = node

    def attach(self, parent: TaskNode, child: TaskNode) -> None:
        child.parent_id = parent.id
        parent.children.append(child)
        self.nodes[child.id] = child


def can_parse(filepath: str) -> bool:
    """True if the file extension is one the parser accepts."""
    return Path(filepath).suffix.lower() in SUPPORTED_EXTENSIONS


def parse_backlog(filepath: str) -> Document:
    """Parse a backlog file and return its Document."""
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Backlog file not found: {filepath}")

    content = path.read_text(encoding="utf-8")
    return parse_backlog_text(content, source_name=path.name)


def parse_backlog_text(content: str, source_name: str = "") -> Document:
    """Parse backlog markdown held in memory."""
    lines = content.splitlines()
    title = extract_title(lines)
    description = extract_description(lines)

    state = build_tree(lines)

    logger.debug(
        f"Parsed '{source_name or title}': {len(state.roots)} root item(s), "
        f"{len(state.nodes)} item(s) total"
    )
    return Document(
        source_name=source_name,
        title=title,
        description=description,
        roots=state.roots,
        nodes=state.nodes,
    )


def extract_title(lines: list[str]) -> str:
    """Text of the first `# ` header, or the default title."""
    for line in lines:
        if TITLE_RE.match(line.strip()):
            return line.strip()[1:].strip()
    return DEFAULT_TITLE


def extract_description(lines: list[str]) -> str:
    """Non-blank lines between the title header and the next `##` header."""
    parts = []
    found_title = False

    for line in lines:
        stripped = line.strip()
        if TITLE_RE.match(stripped):
            found_title = True
            continue
        if not found_title:
            continue
        if stripped.startswith("##"):
            break
        if stripped:
            parts.append(stripped)

    return " ".join(parts)


def build_tree(lines: list[str]) -> ParserState:
    """Run the forward pass over all lines and return the final state."""
    state = ParserState()
    index = 0
    while index < len(lines):
        index = apply_line(state, lines, index)
    return state


def apply_line(state: ParserState, lines: list[str], index: int) -> int:
    """Apply lines[index] to the state. Returns the index of the next unread line."""
    line = lines[index]
    kind = classify_line(line)

    if kind == LineKind.EPIC_HEADER:
        epic = _create_epic(lines, index)
        state.add_root(epic)
        state.current_epic = epic
        state.current_feature = None
        return index + 1

    if kind == LineKind.FEATURE_ITEM:
        if state.current_epic is None:
            logger.warning(
                f"Dropping feature '{_feature_title(line)}' at line {index + 1}: "
                f"no epic precedes it"
            )
            return index + 1
        feature = _create_feature(lines, index)
        state.attach(state.current_epic, feature)
        state.current_feature = feature
        return _consume_feature_properties(feature, lines, index) + 1

    if kind == LineKind.PROPERTY:
        if state.current_feature is not None:
            effort = effort_from_line(line)
            if effort > 0:
                state.current_feature.story_points = effort
        return index + 1

    if kind == LineKind.BULLET:
        task = _create_task(lines, index)
        parent = state.current_feature or state.current_epic
        if parent is not None:
            state.attach(parent, task)
        else:
            state.add_root(task)
        return index + 1

    # Section markers, titles, blank lines and prose don't change the tree
    return index + 1


def _consume_feature_properties(feature: TaskNode, lines: list[str], index: int) -> int:
    """Absorb the property, prose and blank lines directly under a feature item.

    Stops at the first bullet (a task) or boundary line. Returns the index of
    the last absorbed line, or `index` if nothing was absorbed.
    """
    last = index
    end = min(index + SHORT_WINDOW, len(lines))
    for j in range(index + 1, end):
        kind = classify_line(lines[j])
        if kind in BOUNDARY_KINDS or kind == LineKind.BULLET:
            break
        if kind == LineKind.PROPERTY:
            effort = effort_from_line(lines[j])
            if effort > 0:
                feature.story_points = effort
        last = j
    return last


def _create_epic(lines: list[str], index: int) -> TaskNode:
    context = scan_context(lines, index, WorkItemKind.EPIC)
    return new_node(
        WorkItemKind.EPIC,
        _epic_title(lines[index]),
        priority=context.priority,
        story_points=context.story_points,
        business_value=context.business_value,
        description=context.description,
    )


def _create_feature(lines: list[str], index: int) -> TaskNode:
    context = scan_context(lines, index, WorkItemKind.FEATURE)
    return new_node(
        WorkItemKind.FEATURE,
        _feature_title(lines[index]),
        priority=context.priority,
        story_points=context.story_points,
        description=context.description,
    )


def _create_task(lines: list[str], index: int) -> TaskNode:
    context = scan_context(lines, index, WorkItemKind.TASK)
    return new_node(
        WorkItemKind.TASK,
        _task_title(lines[index]),
        priority=Priority.MEDIUM,
        story_points=context.story_points,
        description=context.description,
    )


def _epic_title(line: str) -> str:
    return EPIC_PREFIX_RE.sub("", line.strip()).strip()


def _feature_title(line: str) -> str:
    stripped = line.strip()
    match = FEATURE_ITEM_RE.match(stripped)
    return match.group(1).strip() if match else stripped


def _task_title(line: str) -> str:
    title = BULLET_PREFIX_RE.sub("", line.strip())
    return title.replace("**", "").strip()
