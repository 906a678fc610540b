"""
taskgen submit - Create work items in Azure DevOps.
"""

from taskgen.commands.show import print_document
from taskgen.lib.azure_boards import AzureBoardsClient, WorkItemError, check_az_available
from taskgen.lib.config import TaskgenConfig
from taskgen.lib.fieldmap import load_field_map
from taskgen.lib.hierarchy import build_hierarchy
from taskgen.lib.models import Document
from taskgen.lib.submission import plan_creation_order, submit_hierarchy


def cmd_submit(args, document: Document, config: TaskgenConfig) -> int:
    """Parse, display and submit a backlog."""
    organization = args.organization or config.organization
    project = args.project or config.project

    print_document(document)

    view = build_hierarchy(document)
    steps = plan_creation_order(view, document)

    if args.dry_run:
        print(f"Dry run: {len(steps)} work item(s) would be created. Nothing was submitted.")
        return 0

    if not organization or not project:
        print("ERROR: Organization and project are required.")
        print("  Pass --organization/--project or set AZURE_DEVOPS_ORG/AZURE_DEVOPS_PROJECT in taskgen.env")
        return 2

    ok, message = check_az_available()
    if not ok:
        print(f"ERROR: {message}")
        return 2

    client = AzureBoardsClient(
        organization=organization,
        token=config.resolve_token(args.token),
        field_map=load_field_map(config.config_dir),
        timeout=config.az_timeout,
    )

    print(f"Connecting to {organization}...")
    if not client.test_connection():
        print("ERROR: Could not connect to Azure DevOps. Check the organization URL and token.")
        return 1

    print(f"Creating {len(steps)} work item(s) in {project}...")
    try:
        created = submit_hierarchy(client, view, document, project)
    except WorkItemError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Created {len(created)} work item(s): {', '.join(str(i) for i in created)}")
    return 0
