"""
taskgen show - Print a parsed backlog.
"""

from taskgen.lib.hierarchy import build_hierarchy, format_hierarchy, format_hierarchy_summary
from taskgen.lib.models import Document, WorkItemKind


def print_document(document: Document) -> None:
    """Print title, totals and the work item tree."""
    view = build_hierarchy(document)

    print(f"Backlog: {document.title}")
    print("=" * 60)
    if document.description:
        print(document.description)
    print()
    for line in format_hierarchy_summary(view):
        print(line)
    print()

    tree = format_hierarchy(view)
    loose = [root for root in document.roots if root.kind != WorkItemKind.EPIC]
    if tree:
        print("Hierarchy")
        print("-" * 60)
        for line in tree:
            print(f"  {line}")
        print()
    if loose:
        print("Items without an epic")
        print("-" * 60)
        for node in loose:
            print(f"  {node.kind.value.upper()}: {node.title} ({node.story_points} SP)")
        print()
    if not tree and not loose:
        print("No work items found.")


def cmd_show(args, document: Document) -> int:
    """Show the parsed backlog."""
    print_document(document)
    return 0
