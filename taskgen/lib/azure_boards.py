"""
Azure Boards client.

Creates work items through the Azure CLI (`az boards`, from the azure-devops
extension). Authentication uses a personal access token passed in the
AZURE_DEVOPS_EXT_PAT environment variable, or whatever login the CLI
already has.
"""

import json
import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Optional

from taskgen.lib.fieldmap import (
    FIELD_DESCRIPTION,
    FIELD_TITLE,
    FieldMap,
    build_fields,
    map_work_item_type,
)
from taskgen.lib.models import TaskNode

logger = logging.getLogger(__name__)

# Timeout for az CLI operations (seconds)
AZ_TIMEOUT_SECONDS = 60

PAT_ENV_VAR = "AZURE_DEVOPS_EXT_PAT"


class WorkItemError(Exception):
    """An Azure Boards operation failed."""


@dataclass
class AzResult:
    """Result of an az command."""
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out


def run_az(args: list[str], timeout: int = AZ_TIMEOUT_SECONDS, env: Optional[dict] = None) -> AzResult:
    """Run an az command with timeout handling."""
    cmd = ["az"] + args
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
        )
        return AzResult(
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    except subprocess.TimeoutExpired:
        return AzResult(
            returncode=-1,
            stdout="",
            stderr=f"Command timed out after {timeout}s",
            timed_out=True,
        )


def check_az_available() -> tuple[bool, str]:
    """Check the az CLI and its azure-devops extension are installed.

    Returns: (ok, error_message)
    """
    try:
        result = subprocess.run(["az", "--version"], capture_output=True, timeout=30)
        if result.returncode != 0:
            return False, "Azure CLI (az) not installed\n  Install: https://aka.ms/installazurecli"

        result = subprocess.run(
            ["az", "extension", "show", "--name", "azure-devops"],
            capture_output=True,
            text=True,
            timeout=30,
        )
        if result.returncode != 0:
            return False, "Azure DevOps extension missing\n  Run: az extension add --name azure-devops"

        return True, ""

    except FileNotFoundError:
        return False, "Azure CLI (az) not found\n  Install: https://aka.ms/installazurecli"
    except subprocess.TimeoutExpired:
        return False, "Azure CLI timed out"


@dataclass
class AzureBoardsClient:
    """Creates work items in one Azure DevOps organization."""
    organization: str
    token: Optional[str] = None
    field_map: FieldMap = field(default_factory=FieldMap)
    timeout: int = AZ_TIMEOUT_SECONDS

    def _env(self) -> Optional[dict]:
        if not self.token:
            return None
        env = os.environ.copy()
        env[PAT_ENV_VAR] = self.token
        return env

    def _run(self, args: list[str]) -> AzResult:
        return run_az(
            args + ["--organization", self.organization, "--output", "json"],
            timeout=self.timeout,
            env=self._env(),
        )

    def test_connection(self) -> bool:
        """True if the organization is reachable and lists at least one project."""
        result = self._run(["devops", "project", "list"])
        if not result.success:
            logger.warning(f"Connection test failed: {result.stderr.strip()}")
            return False
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError:
            return False
        projects = data.get("value", []) if isinstance(data, dict) else data
        return bool(projects)

    def create_work_item(self, node: TaskNode, project: str, parent_id: Optional[int] = None) -> int:
        """Create a work item for `node` and link it under `parent_id`.

        Returns the new work item's id.

        Raises:
            WorkItemError: if the item or its parent link cannot be created
        """
        fields = build_fields(node, self.field_map)
        args = [
            "boards", "work-item", "create",
            "--project", project,
            "--type", map_work_item_type(node.kind, self.field_map),
            "--title", fields.pop(FIELD_TITLE),
            "--description", fields.pop(FIELD_DESCRIPTION),
        ]
        if fields:
            args.append("--fields")
            args.extend(f"{name}={value}" for name, value in fields.items())

        result = self._run(args)
        if not result.success:
            logger.error(f"Failed to create work item '{node.title}': {result.stderr.strip()}")
            raise WorkItemError(f"Failed to create work item '{node.title}': {result.stderr.strip()}")

        try:
            work_item_id = int(json.loads(result.stdout)["id"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            raise WorkItemError(f"Invalid response from az creating '{node.title}'") from None

        if parent_id is not None:
            self.add_parent_link(work_item_id, parent_id)

        return work_item_id

    def add_parent_link(self, child_id: int, parent_id: int) -> None:
        """Make `parent_id` the parent of `child_id`."""
        result = self._run([
            "boards", "work-item", "relation", "add",
            "--id", str(child_id),
            "--relation-type", "parent",
            "--target-id", str(parent_id),
        ])
        if not result.success:
            logger.error(f"Failed to link {child_id} under {parent_id}: {result.stderr.strip()}")
            raise WorkItemError(
                f"Failed to link work item {child_id} under {parent_id}: {result.stderr.strip()}"
            )
