"""
taskgen export - Write a parsed backlog as JSON.
"""

import sys
from pathlib import Path

from taskgen.lib.export import export_json, write_export
from taskgen.lib.models import Document
from taskgen.lib.validate import ValidationError


def cmd_export(args, document: Document) -> int:
    """Export the document to --output, or stdout."""
    try:
        if args.output:
            output = Path(args.output)
            write_export(document, output)
            print(f"Wrote {output}")
        else:
            sys.stdout.write(export_json(document))
    except ValidationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0
