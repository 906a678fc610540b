"""
Configuration loader for taskgen.

Reads taskgen.env from the config directory. Every key is optional; CLI
flags take precedence over file values.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import envparse
from .azure_boards import AZ_TIMEOUT_SECONDS, PAT_ENV_VAR

logger = logging.getLogger(__name__)

CONFIG_FILE = "taskgen.env"


@dataclass
class TaskgenConfig:
    """Settings from taskgen.env"""
    organization: str  # e.g. https://dev.azure.com/yourorg
    project: str
    az_timeout: int
    pat_env_var: str  # Environment variable holding the access token
    config_dir: Path

    def resolve_token(self, explicit: Optional[str] = None) -> Optional[str]:
        """Token from the CLI if given, else from the configured environment variable."""
        if explicit:
            return explicit
        return os.environ.get(self.pat_env_var) or None


def load_config(config_dir: Path) -> TaskgenConfig:
    """Load taskgen.env (if present) and return TaskgenConfig."""
    config_path = config_dir / CONFIG_FILE
    env = envparse.load_env(str(config_path)) if config_path.exists() else {}

    timeout_raw = env.get("AZ_TIMEOUT", str(AZ_TIMEOUT_SECONDS))
    try:
        az_timeout = int(timeout_raw)
    except ValueError:
        logger.warning(f"Invalid AZ_TIMEOUT '{timeout_raw}', using {AZ_TIMEOUT_SECONDS}")
        az_timeout = AZ_TIMEOUT_SECONDS

    return TaskgenConfig(
        organization=env.get("AZURE_DEVOPS_ORG", ""),
        project=env.get("AZURE_DEVOPS_PROJECT", ""),
        az_timeout=az_timeout,
        pat_env_var=env.get("PAT_ENV_VAR", PAT_ENV_VAR),
        config_dir=config_dir,
    )
