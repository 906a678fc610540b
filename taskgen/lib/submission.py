"""
Submission ordering.

Work items must be created parent-first so each child can be linked to the
id its parent was assigned. The order is:

  1. each epic
  2. the epic's features
  3. each feature's stories and tasks
  4. tasks under each story
  5. the epic's direct children that are not features
  6. root items that are not epics (no parent)

Steps 2-5 run per epic, before the next epic is created.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from taskgen.lib.hierarchy import HierarchyView
from taskgen.lib.models import Document, TaskNode, WorkItemKind

logger = logging.getLogger(__name__)


@dataclass
class CreationStep:
    node: TaskNode
    parent: Optional[TaskNode] = None


def plan_creation_order(view: HierarchyView, document: Document) -> list[CreationStep]:
    """List every item to create, in creation order, with its parent."""
    steps = []

    for epic in view.epics:
        steps.append(CreationStep(epic))

        for feature in view.epic_to_features.get(epic.id, []):
            steps.append(CreationStep(feature, epic))

            for story in view.feature_to_stories.get(feature.id, []):
                steps.append(CreationStep(story, feature))

                for task in story.children:
                    if task.kind == WorkItemKind.TASK:
                        steps.append(CreationStep(task, story))

        for child in epic.children:
            if child.kind != WorkItemKind.FEATURE:
                steps.append(CreationStep(child, epic))

    for root in document.roots:
        if root.kind != WorkItemKind.EPIC:
            steps.append(CreationStep(root))

    return steps


def submit_hierarchy(client, view: HierarchyView, document: Document, project: str) -> list[int]:
    """Create all items through `client` and return the assigned ids in order.

    `client` needs a `create_work_item(node, project, parent_id=None) -> int`
    method. Stops at the first failure; the client's exception propagates.
    """
    assigned: dict[str, int] = {}
    created = []

    for step in plan_creation_order(view, document):
        parent_id = assigned[step.parent.id] if step.parent is not None else None
        work_item_id = client.create_work_item(step.node, project, parent_id=parent_id)
        assigned[step.node.id] = work_item_id
        created.append(work_item_id)
        logger.info(f"Created {step.node.kind.value} #{work_item_id}: {step.node.title}")

    return created
