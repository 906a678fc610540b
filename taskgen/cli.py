#!/usr/bin/env python3
"""taskgen CLI entrypoint."""

import argparse
import logging
import sys
from pathlib import Path

from taskgen.lib.backlogparse import SUPPORTED_EXTENSIONS, can_parse, parse_backlog
from taskgen.lib.config import load_config
from taskgen.commands import show as cmd_show_module
from taskgen.commands import export as cmd_export_module
from taskgen.commands import submit as cmd_submit_module


def get_config(args):
    """Load taskgen.env from --config-dir or the current directory."""
    config_dir = Path(args.config_dir) if args.config_dir else Path.cwd()
    try:
        return load_config(config_dir)
    except ValueError as e:
        print(f"ERROR: Invalid config in {config_dir}: {e}")
        sys.exit(2)


def load_document(args):
    """Parse the backlog named on the command line, or exit with an error."""
    if not can_parse(args.file):
        print(f"ERROR: Unsupported file type: {args.file}")
        print(f"  Supported: {', '.join(SUPPORTED_EXTENSIONS)}")
        sys.exit(2)
    try:
        return parse_backlog(args.file)
    except FileNotFoundError as e:
        print(f"ERROR: {e}")
        sys.exit(2)


def cmd_show(args):
    document = load_document(args)
    return cmd_show_module.cmd_show(args, document)


def cmd_export(args):
    document = load_document(args)
    return cmd_export_module.cmd_export(args, document)


def cmd_submit(args):
    config = get_config(args)
    document = load_document(args)
    return cmd_submit_module.cmd_submit(args, document, config)


def main():
    parser = argparse.ArgumentParser(
        prog='taskgen',
        description='Convert markdown backlogs into Azure DevOps work items',
    )
    parser.add_argument('--config-dir', '-C', help='Directory holding taskgen.env and fields.yaml (default: cwd)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # taskgen show
    p_show = subparsers.add_parser('show', help='Parse a backlog and print its hierarchy')
    p_show.add_argument('file', help='Backlog file (.md, .markdown, .txt)')
    p_show.set_defaults(func=cmd_show)

    # taskgen export
    p_export = subparsers.add_parser('export', help='Write the parsed backlog as JSON')
    p_export.add_argument('file', help='Backlog file (.md, .markdown, .txt)')
    p_export.add_argument('--output', '-o', help='Output path (default: stdout)')
    p_export.set_defaults(func=cmd_export)

    # taskgen submit
    p_submit = subparsers.add_parser('submit', help='Create work items in Azure DevOps')
    p_submit.add_argument('file', help='Backlog file (.md, .markdown, .txt)')
    p_submit.add_argument('--organization', help='Organization URL (e.g. https://dev.azure.com/yourorg)')
    p_submit.add_argument('--project', '-p', help='Azure DevOps project name')
    p_submit.add_argument('--token', '-t', help='Personal access token (default: from environment)')
    p_submit.add_argument('--dry-run', action='store_true', help='Display work items without creating them')
    p_submit.set_defaults(func=cmd_submit)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
