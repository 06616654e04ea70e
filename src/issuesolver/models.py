"""Issue Solver data models — issues, runner config, and batch outcomes.

An issue is a directory under the issues root. Its workflow phase is
signalled purely by marker files:
  - problem.md: the problem is written up and ready to be worked
  - solution.md: the external workflow has produced a solution
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

WORKFLOW_PLACEHOLDER = "{issue_dir}"


class IssueStatus(str, enum.Enum):
    """Workflow phase of an issue, derived from its marker files."""

    DRAFT = "draft"
    UNSOLVED = "unsolved"
    SOLVED = "solved"


class Issue(BaseModel):
    """A single issue directory and the markers found in it."""

    slug: str = Field(description="Directory name of the issue")
    path: str = Field(description="Path to the issue directory")
    has_problem: bool = Field(default=False, description="Problem marker file exists")
    has_solution: bool = Field(default=False, description="Solution marker file exists")

    @property
    def status(self) -> IssueStatus:
        if not self.has_problem:
            return IssueStatus.DRAFT
        if self.has_solution:
            return IssueStatus.SOLVED
        return IssueStatus.UNSOLVED


class SolverConfig(BaseModel):
    """Runner configuration — parsed from issue-solver.yaml.

    Controls where issues live, which marker files mean what, and how the
    external assistant is invoked for each unsolved issue.
    """

    model_config = ConfigDict(extra="forbid")

    issues_dir: str = Field(default="issues", description="Root directory holding one subdirectory per issue")
    problem_file: str = Field(default="problem.md", description="Marker file for a written-up problem")
    solution_file: str = Field(default="solution.md", description="Marker file for a solved issue")

    command: str = Field(default="claude", description="External assistant executable")
    workflow: str = Field(
        default="/go-k8s:solve {issue_dir}",
        description="Workflow invocation passed to the assistant; {issue_dir} is substituted",
    )
    output_format: str = Field(default="stream-json", description="Assistant output format")
    verbose: bool = Field(default=True, description="Ask the assistant for verbose diagnostics")
    skip_permissions: bool = Field(default=True, description="Run the assistant without permission prompts")
    extra_args: list[str] = Field(default_factory=list, description="Extra arguments appended verbatim")

    @field_validator("workflow")
    @classmethod
    def validate_workflow(cls, v: str) -> str:
        """Require the issue directory placeholder."""
        if WORKFLOW_PLACEHOLDER not in v:
            raise ValueError(f"workflow must contain '{WORKFLOW_PLACEHOLDER}': got '{v}'")
        return v

    @field_validator("problem_file", "solution_file")
    @classmethod
    def validate_marker(cls, v: str) -> str:
        """Markers are plain file names inside the issue directory."""
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Marker must be a bare file name: got '{v}'")
        return v

    def render_workflow(self, issue_dir: str) -> str:
        """Substitute the issue directory into the workflow string."""
        return self.workflow.replace(WORKFLOW_PLACEHOLDER, issue_dir)


class IssueOutcome(BaseModel):
    """Result of one external invocation for one issue."""

    slug: str
    path: str
    returncode: int
    duration_s: float = Field(default=0.0, description="Wall-clock seconds the child ran")

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class BatchReport(BaseModel):
    """Outcomes of a batch run, in processing order."""

    outcomes: list[IssueOutcome] = Field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.outcomes)

    @property
    def failed(self) -> list[IssueOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def succeeded(self) -> list[IssueOutcome]:
        return [o for o in self.outcomes if o.succeeded]


def parse_config_yaml(path: Path, base: Optional[SolverConfig] = None) -> SolverConfig:
    """Parse an issue-solver.yaml file into a SolverConfig.

    Args:
        path: Path to the config file.
        base: Config whose values are kept for keys the file omits.

    Returns:
        SolverConfig: The merged configuration.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the YAML is malformed, not a mapping, or fails validation.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ValueError(f"{path.name} is not valid YAML: {exc}") from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path.name} must be a YAML mapping, got {type(raw).__name__}")

    merged = (base or SolverConfig()).model_dump()
    merged.update(raw)
    return SolverConfig.model_validate(merged)


def generate_config_yaml(config: SolverConfig) -> str:
    """Serialize a SolverConfig back to YAML."""
    data = config.model_dump()
    return yaml.dump(data, default_flow_style=False, sort_keys=False)
