"""
Hierarchy aggregation over a parsed backlog.

Derives the epic/feature/story groupings and totals used for display and
submission. Views are recomputed from the document on every call and never
modify it.
"""

from dataclasses import dataclass, field

from taskgen.lib.models import Document, TaskNode, WorkItemKind

STORY_KINDS = (WorkItemKind.USER_STORY, WorkItemKind.TASK)


@dataclass
class HierarchyView:
    """Read-only projection of a Document."""
    epics: list[TaskNode] = field(default_factory=list)
    epic_to_features: dict[str, list[TaskNode]] = field(default_factory=dict)
    feature_to_stories: dict[str, list[TaskNode]] = field(default_factory=dict)
    total_story_points: int = 0
    total_work_items: int = 0


def build_hierarchy(document: Document) -> HierarchyView:
    """Group epics, features and stories and compute totals."""
    epics = [node for node in document.roots if node.kind == WorkItemKind.EPIC]
    epic_to_features = {}
    feature_to_stories = {}

    for epic in epics:
        features = [c for c in epic.children if c.kind == WorkItemKind.FEATURE]
        epic_to_features[epic.id] = features
        for feature in features:
            feature_to_stories[feature.id] = [c for c in feature.children if c.kind in STORY_KINDS]

    return HierarchyView(
        epics=epics,
        epic_to_features=epic_to_features,
        feature_to_stories=feature_to_stories,
        total_story_points=sum_story_points(document.roots),
        total_work_items=count_work_items(document.roots),
    )


def sum_story_points(nodes: list[TaskNode]) -> int:
    total = 0
    for node in nodes:
        total += node.story_points
        total += sum_story_points(node.children)
    return total


def count_work_items(nodes: list[TaskNode]) -> int:
    count = len(nodes)
    for node in nodes:
        count += count_work_items(node.children)
    return count


def flatten_tasks(document: Document) -> list[TaskNode]:
    """Every node in the document, depth-first, parents before children."""
    flat = []
    for root in document.roots:
        _collect(root, flat)
    return flat


def _collect(node: TaskNode, out: list[TaskNode]) -> None:
    out.append(node)
    for child in node.children:
        _collect(child, out)


def _item_line(node: TaskNode, indent: str) -> str:
    label = node.kind.value.upper()
    return f"{indent}{label}: {node.title} ({node.story_points} SP)"


def format_hierarchy(view: HierarchyView) -> list[str]:
    """Format the hierarchy as a list of lines for display."""
    lines = []
    for epic in view.epics:
        lines.append(f"EPIC: {epic.title} ({epic.story_points} SP, {epic.priority.value} priority)")
        for feature in view.epic_to_features.get(epic.id, []):
            lines.append(_item_line(feature, "  "))
            for story in view.feature_to_stories.get(feature.id, []):
                lines.append(_item_line(story, "    "))
        # Items attached straight to the epic
        for child in epic.children:
            if child.kind != WorkItemKind.FEATURE:
                lines.append(_item_line(child, "  "))
    return lines


def format_hierarchy_summary(view: HierarchyView) -> list[str]:
    """Format totals as a list of lines for display."""
    return [
        f"  Epics:         {len(view.epics)}",
        f"  Features:      {len(view.feature_to_stories)}",
        f"  Work items:    {view.total_work_items}",
        f"  Story points:  {view.total_story_points}",
    ]
