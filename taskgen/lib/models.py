"""
Data models for parsed backlogs.

A Document owns a forest of TaskNodes. Children are owned by their parent's
`children` list; the back-reference is a plain id (`parent_id`) resolved
through the document's node index, so the tree never holds cyclic references.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator, Optional


class WorkItemKind(Enum):
    """Granularity of a backlog item."""
    EPIC = "Epic"
    FEATURE = "Feature"
    USER_STORY = "UserStory"
    TASK = "Task"
    BUG = "Bug"


class Priority(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


@dataclass
class TaskNode:
    """A single backlog item and the items it owns."""
    id: str
    title: str
    kind: WorkItemKind
    description: str = ""
    priority: Priority = Priority.MEDIUM
    story_points: int = 0
    acceptance_criteria: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    business_value: str = ""
    children: list["TaskNode"] = field(default_factory=list)
    parent_id: Optional[str] = None  # None for roots

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


def new_node(kind: WorkItemKind, title: str, **attrs) -> TaskNode:
    """Create a node with a fresh identifier."""
    return TaskNode(id=str(uuid.uuid4()), title=title, kind=kind, **attrs)


@dataclass
class Document:
    """Result of parsing one backlog text."""
    source_name: str
    title: str
    description: str
    roots: list[TaskNode] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)
    parsed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    nodes: dict[str, TaskNode] = field(default_factory=dict, repr=False)

    def get_node(self, node_id: str) -> Optional[TaskNode]:
        return self.nodes.get(node_id)

    def parent_of(self, node: TaskNode) -> Optional[TaskNode]:
        """Resolve a node's parent through the index. None for roots."""
        if node.parent_id is None:
            return None
        return self.nodes.get(node.parent_id)

    def iter_nodes(self) -> Iterator[TaskNode]:
        """Yield every reachable node, depth-first, parents before children."""
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))
