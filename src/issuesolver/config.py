"""Issue Solver configuration — file, environment, then caller overrides.

Resolution order:
    defaults                      SolverConfig()
    config file                   --config PATH, or ./issue-solver.yaml if present
    environment                   ISSUE_SOLVER_ISSUES_DIR, ISSUE_SOLVER_COMMAND
    overrides                     CLI options (None means "not given")
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

from . import CONFIG_FILENAME
from .models import SolverConfig, parse_config_yaml

logger = logging.getLogger("issuesolver.config")

ENV_OVERRIDES = {
    "ISSUE_SOLVER_ISSUES_DIR": "issues_dir",
    "ISSUE_SOLVER_COMMAND": "command",
}


def _default_config_path() -> Optional[Path]:
    """Return ./issue-solver.yaml if it exists."""
    candidate = Path.cwd() / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_config(
    path: Optional[Path] = None,
    **overrides: Any,
) -> SolverConfig:
    """Build the effective runner configuration.

    Args:
        path: Explicit config file. Must exist when given.
        **overrides: Field values that win over file and environment.
            Keys whose value is None are ignored.

    Returns:
        SolverConfig: The resolved configuration.

    Raises:
        FileNotFoundError: If an explicit config path doesn't exist.
        ValueError: If the config file or overrides fail validation.
    """
    config = SolverConfig()

    source = path or _default_config_path()
    if source is not None:
        logger.debug("Loading config from %s", source)
        config = parse_config_yaml(source, base=config)

    updates: dict[str, Any] = {}
    for env_name, field in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            logger.debug("%s overrides %s", env_name, field)
            updates[field] = value

    updates.update({k: v for k, v in overrides.items() if v is not None})
    if not updates:
        return config

    merged = config.model_dump()
    merged.update(updates)
    return SolverConfig.model_validate(merged)
