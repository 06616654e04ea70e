"""Issue Solver batch runner — hand each unsolved issue to the assistant CLI.

Two phases, each visited once per run:
    discover    scan the issues root, print every unsolved issue path and the count
    dispatch    for each issue in order, print a banner and run the assistant
                to completion before starting the next one

The assistant inherits this process's stdio so its stream-json output
goes straight to the terminal. Its exit status is recorded in the
BatchReport but never stops the batch.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from .models import BatchReport, Issue, IssueOutcome, SolverConfig
from .tracker import IssueTracker

logger = logging.getLogger("issuesolver.runner")

# Shell convention for "command not found / not executable".
EXIT_NOT_RUNNABLE = 127


def build_command(config: SolverConfig, issue: Issue) -> list[str]:
    """Assemble the assistant command line for one issue.

    Args:
        config: Runner configuration.
        issue: The issue to hand over.

    Returns:
        list[str]: argv for subprocess.
    """
    argv = [config.command, "--print"]
    if config.skip_permissions:
        argv.append("--dangerously-skip-permissions")
    argv.append(config.render_workflow(issue.path))
    argv.extend(["--output-format", config.output_format])
    if config.verbose:
        argv.append("--verbose")
    argv.extend(config.extra_args)
    return argv


class BatchRunner:
    """Drives the assistant over every unsolved issue, one at a time.

    Args:
        config: Runner configuration.
        console: Where progress is printed (default: stdout).
    """

    def __init__(self, config: SolverConfig, console: Optional[Console] = None) -> None:
        self.config = config
        self.console = console or Console()
        self.tracker = IssueTracker(
            Path(config.issues_dir),
            problem_file=config.problem_file,
            solution_file=config.solution_file,
        )

    def discover(self) -> tuple[Issue, ...]:
        """Find unsolved issues, printing each path as it is found.

        Returns:
            tuple[Issue, ...]: Unsolved issues in directory order.
        """
        found: list[Issue] = []
        for issue in self.tracker.iter_unsolved():
            self.console.print(issue.path, markup=False, highlight=False, soft_wrap=True)
            found.append(issue)

        self.console.print(f"Found {len(found)} unsolved issues", soft_wrap=True)
        self.console.print()
        return tuple(found)

    def run_one(self, issue: Issue) -> IssueOutcome:
        """Run the assistant for one issue and wait for it to exit.

        A non-zero exit is logged, not raised. An executable that cannot be
        started is recorded with exit code 127.
        """
        argv = build_command(self.config, issue)
        logger.debug("Running: %s", shlex.join(argv))

        started = time.monotonic()
        try:
            result = subprocess.run(argv, check=False)
            returncode = result.returncode
        except OSError as exc:
            logger.error("Could not start %s for %s: %s", argv[0], issue.slug, exc)
            returncode = EXIT_NOT_RUNNABLE
        duration = time.monotonic() - started

        if returncode != 0:
            logger.warning("Issue '%s' exited with code %d", issue.slug, returncode)

        return IssueOutcome(
            slug=issue.slug,
            path=issue.path,
            returncode=returncode,
            duration_s=round(duration, 3),
        )

    def dispatch(self, issues: Sequence[Issue], dry_run: bool = False) -> BatchReport:
        """Process issues strictly in order, one child process at a time.

        Args:
            issues: Issues from discover().
            dry_run: Print each command line instead of running it.

        Returns:
            BatchReport: One outcome per issue actually run.
        """
        report = BatchReport()
        for issue in issues:
            self.console.print(
                f"=== Processing unsolved issue: {issue.slug} ===",
                markup=False,
                highlight=False,
                soft_wrap=True,
            )
            if dry_run:
                self.console.print(
                    shlex.join(build_command(self.config, issue)),
                    markup=False,
                    highlight=False,
                    soft_wrap=True,
                )
            else:
                report.outcomes.append(self.run_one(issue))
            self.console.print()

        self.console.print("All unsolved issues processed!")
        return report

    def run(self, dry_run: bool = False) -> BatchReport:
        """Discover, then dispatch."""
        issues = self.discover()
        return self.dispatch(issues, dry_run=dry_run)
