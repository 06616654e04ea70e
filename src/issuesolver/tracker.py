"""Issue Solver tracker — read-only view of the issues directory.

Directory layout:
    issues/
        cache-eviction-race/
            problem.md          # ready to be worked
        crashloop-on-upgrade/
            problem.md
            solution.md         # already solved
        half-written-idea/      # no problem.md yet, not ready

The tracker only checks which marker files exist. It never creates,
locks, or modifies anything under the issues root.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from .models import Issue, IssueStatus

logger = logging.getLogger("issuesolver.tracker")


class IssueTracker:
    """Inspects issue directories and classifies them by marker files.

    Args:
        root: The issues root directory.
        problem_file: Marker file name for a written-up problem.
        solution_file: Marker file name for a solved issue.
    """

    def __init__(
        self,
        root: Path,
        problem_file: str = "problem.md",
        solution_file: str = "solution.md",
    ) -> None:
        self.root = Path(root)
        self.problem_file = problem_file
        self.solution_file = solution_file

    def issue_dirs(self) -> list[Path]:
        """Immediate, non-hidden subdirectories of the root in lexical order."""
        if not self.root.is_dir():
            logger.warning("Issues directory not found: %s", self.root)
            return []

        return [
            entry
            for entry in sorted(self.root.iterdir(), key=lambda p: p.name)
            if entry.is_dir() and not entry.name.startswith(".")
        ]

    def inspect(self, issue_dir: Path) -> Issue:
        """Build an Issue from the marker files present in a directory."""
        return Issue(
            slug=issue_dir.name,
            path=str(issue_dir),
            has_problem=(issue_dir / self.problem_file).is_file(),
            has_solution=(issue_dir / self.solution_file).is_file(),
        )

    def scan(self, status: Optional[IssueStatus] = None) -> list[Issue]:
        """List every issue, optionally filtered by status.

        Args:
            status: If provided, only return issues in this phase.

        Returns:
            list[Issue]: Matching issues in lexical order.
        """
        issues = [self.inspect(d) for d in self.issue_dirs()]
        if status is None:
            return issues
        return [i for i in issues if i.status == status]

    def iter_unsolved(self) -> Iterator[Issue]:
        """Yield issues that have a problem marker but no solution marker.

        The problem marker is checked first; directories without one are
        skipped before the solution marker is looked at.
        """
        for issue_dir in self.issue_dirs():
            if not (issue_dir / self.problem_file).is_file():
                logger.debug("Skipping %s: no %s", issue_dir.name, self.problem_file)
                continue
            if (issue_dir / self.solution_file).is_file():
                logger.debug("Skipping %s: already solved", issue_dir.name)
                continue
            yield Issue(slug=issue_dir.name, path=str(issue_dir), has_problem=True, has_solution=False)
