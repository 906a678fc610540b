"""
Work item field mapping for Azure Boards.

Translates backlog items into Azure DevOps field values. Defaults match the
Agile process template. Projects on another template (Scrum's "Product
Backlog Item", Basic's "Issue") override names in fields.yaml:

    work_item_types:
      UserStory: Product Backlog Item
    priorities:
      High: 2
    business_values:
      high: 200

Each section is merged over the defaults key by key.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from taskgen.lib.models import TaskNode, WorkItemKind

logger = logging.getLogger(__name__)

FIELDS_FILE = "fields.yaml"

FIELD_TITLE = "System.Title"
FIELD_DESCRIPTION = "System.Description"
FIELD_TAGS = "System.Tags"
FIELD_PRIORITY = "Microsoft.VSTS.Common.Priority"
FIELD_BUSINESS_VALUE = "Microsoft.VSTS.Common.BusinessValue"
FIELD_STORY_POINTS = "Microsoft.VSTS.Scheduling.StoryPoints"
FIELD_ORIGINAL_ESTIMATE = "Microsoft.VSTS.Scheduling.OriginalEstimate"

# Keyed by WorkItemKind.value
DEFAULT_WORK_ITEM_TYPES = {
    "Epic": "Epic",
    "Feature": "Feature",
    "UserStory": "User Story",
    "Task": "Task",
    "Bug": "Bug",
}

# Keyed by Priority.value. Azure priorities run 1 (highest) to 4.
DEFAULT_PRIORITIES = {
    "Critical": 1,
    "High": 1,
    "Medium": 2,
    "Low": 3,
}

DEFAULT_BUSINESS_VALUES = {
    "high": 100,
    "medium": 50,
    "low": 10,
}

LEADING_WORD_RE = re.compile(r'^\s*([A-Za-z]+)')


@dataclass
class FieldMap:
    """Field mapping from fields.yaml."""
    work_item_types: dict[str, str] = field(default_factory=lambda: DEFAULT_WORK_ITEM_TYPES.copy())
    priorities: dict[str, int] = field(default_factory=lambda: DEFAULT_PRIORITIES.copy())
    business_values: dict[str, int] = field(default_factory=lambda: DEFAULT_BUSINESS_VALUES.copy())


def load_field_map(config_dir: Optional[Path]) -> FieldMap:
    """Load fields.yaml and return FieldMap.

    If config_dir is None or the file doesn't exist, returns defaults.
    """
    if config_dir is None:
        return FieldMap()

    config_path = config_dir / FIELDS_FILE
    if not config_path.exists():
        return FieldMap()

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
        field_map = FieldMap()
        field_map.work_item_types.update(data.get("work_item_types") or {})
        field_map.priorities.update(
            {k: int(v) for k, v in (data.get("priorities") or {}).items()}
        )
        field_map.business_values.update(
            {k.lower(): int(v) for k, v in (data.get("business_values") or {}).items()}
        )
        return field_map
    except (yaml.YAMLError, AttributeError, TypeError, ValueError) as e:
        logger.warning(f"Failed to parse {config_path}: {e}")
        return FieldMap()


def map_work_item_type(kind: WorkItemKind, field_map: FieldMap) -> str:
    return field_map.work_item_types.get(kind.value, "Task")


def map_business_value(value: str, field_map: FieldMap) -> Optional[int]:
    """Convert free-text business value to a number, or None.

    Accepts a plain integer ("40") or text starting with a band word
    ("High - security is important").
    """
    text = value.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    match = LEADING_WORD_RE.match(text)
    if match:
        return field_map.business_values.get(match.group(1).lower())
    return None


def build_description(node: TaskNode) -> str:
    """Description HTML, with acceptance criteria appended as a numbered list."""
    description = node.description
    if node.acceptance_criteria:
        if description:
            description += "<br/><br/>"
        description += "<strong>Acceptance Criteria:</strong><br/>"
        description += "<br/>".join(
            f"{i}. {criterion}" for i, criterion in enumerate(node.acceptance_criteria, 1)
        )
    return description


def build_fields(node: TaskNode, field_map: FieldMap) -> dict[str, str]:
    """Field reference name -> value for creating `node`.

    Title and description are included; empty optional fields are left out.
    """
    fields = {
        FIELD_TITLE: node.title,
        FIELD_DESCRIPTION: build_description(node),
        FIELD_PRIORITY: str(field_map.priorities.get(node.priority.value, 2)),
    }

    if node.story_points > 0:
        if node.kind in (WorkItemKind.USER_STORY, WorkItemKind.FEATURE):
            fields[FIELD_STORY_POINTS] = str(node.story_points)
        elif node.kind == WorkItemKind.TASK:
            fields[FIELD_ORIGINAL_ESTIMATE] = str(node.story_points)

    business_value = map_business_value(node.business_value, field_map)
    if business_value is not None:
        fields[FIELD_BUSINESS_VALUE] = str(business_value)

    if node.tags:
        fields[FIELD_TAGS] = "; ".join(node.tags)

    return fields
