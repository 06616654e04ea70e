"""Issue Solver — batch driver for unsolved issue workflows.

Scans an issues directory for problems that have no solution yet and
hands each one to an external AI assistant CLI, one at a time.
"""

__version__ = "0.1.0"

CONFIG_FILENAME = "issue-solver.yaml"
