"""
JSON export of parsed backlogs.

The export holds the full item tree plus the hierarchy totals, and is
validated against backlog.schema.json before it is written.
"""

import json
from pathlib import Path
from typing import Optional

from taskgen.lib.hierarchy import HierarchyView, build_hierarchy
from taskgen.lib.models import Document, TaskNode
from taskgen.lib.validate import validate, validate_before_write

SCHEMA_NAME = "backlog"


def node_to_dict(node: TaskNode) -> dict:
    return {
        "id": node.id,
        "title": node.title,
        "kind": node.kind.value,
        "priority": node.priority.value,
        "story_points": node.story_points,
        "description": node.description,
        "business_value": node.business_value,
        "acceptance_criteria": list(node.acceptance_criteria),
        "tags": list(node.tags),
        "dependencies": list(node.dependencies),
        "parent_id": node.parent_id,
        "children": [node_to_dict(child) for child in node.children],
    }


def document_to_dict(document: Document, view: Optional[HierarchyView] = None) -> dict:
    """Serialize a document and its hierarchy totals."""
    if view is None:
        view = build_hierarchy(document)
    return {
        "source_name": document.source_name,
        "title": document.title,
        "description": document.description,
        "parsed_at": document.parsed_at.isoformat(),
        "metadata": dict(document.metadata),
        "summary": {
            "epics": len(view.epics),
            "features": len(view.feature_to_stories),
            "total_story_points": view.total_story_points,
            "total_work_items": view.total_work_items,
        },
        "items": [node_to_dict(root) for root in document.roots],
    }


def export_json(document: Document) -> str:
    """Validated JSON text for a document."""
    data = document_to_dict(document)
    validate(data, SCHEMA_NAME)
    return json.dumps(data, indent=2) + "\n"


def write_export(document: Document, filepath: Path) -> None:
    """Validate and write the document export to `filepath`."""
    data = document_to_dict(document)
    validate_before_write(data, SCHEMA_NAME, filepath)
    filepath.write_text(json.dumps(data, indent=2) + "\n")
