"""Issue Solver CLI — work through unsolved issues from the terminal.

Commands:
    solve       Run the assistant over every unsolved issue (sequentially)
    list        Show every issue directory and its status
    init        Write a starter issue-solver.yaml
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import CONFIG_FILENAME, __version__
from .config import load_config
from .models import BatchReport, IssueStatus, SolverConfig, generate_config_yaml
from .runner import BatchRunner
from .tracker import IssueTracker

console = Console()


@click.group()
@click.version_option(__version__, prog_name="issue-solver")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help=f"Config file (default: ./{CONFIG_FILENAME} if present).")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], debug: bool) -> None:
    """Issue Solver — batch driver for unsolved issue workflows.

    Finds issues with a problem write-up but no solution and hands each
    one to an AI assistant CLI, one at a time.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None


def _resolve_config(ctx: click.Context, **overrides) -> SolverConfig:
    """Load config for a command, exiting 1 on a bad config."""
    try:
        return load_config(ctx.obj.get("config_path"), **overrides)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        sys.exit(1)


def _print_summary(report: BatchReport) -> None:
    """Print a per-issue outcome table."""
    if not report.outcomes:
        console.print("[dim]No issues were run.[/dim]")
        return

    table = Table(title="Batch Summary")
    table.add_column("Issue", style="cyan")
    table.add_column("Exit", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Result")

    for o in report.outcomes:
        result = "[green]ok[/green]" if o.succeeded else "[red]failed[/red]"
        table.add_row(o.slug, str(o.returncode), f"{o.duration_s:.1f}s", result)

    console.print(table)
    console.print(
        f"  Succeeded: {len(report.succeeded)}  Failed: {len(report.failed)}"
    )


@main.command()
@click.option("--issues-dir", default=None, help="Issues root directory.")
@click.option("--command", "command", default=None, help="Assistant executable.")
@click.option("--workflow", default=None, help="Workflow string; must contain {issue_dir}.")
@click.option("--dry-run", is_flag=True, help="Print the commands without running them.")
@click.option("--summary", is_flag=True, help="Print a per-issue outcome table at the end.")
@click.option("--strict", is_flag=True, help="Exit 1 if any assistant run failed.")
@click.pass_context
def solve(
    ctx: click.Context,
    issues_dir: Optional[str],
    command: Optional[str],
    workflow: Optional[str],
    dry_run: bool,
    summary: bool,
    strict: bool,
) -> None:
    """Run the assistant over every unsolved issue.

    Issues are processed one at a time, in directory order. A failing
    run is logged and the batch moves on to the next issue.
    """
    config = _resolve_config(ctx, issues_dir=issues_dir, command=command, workflow=workflow)
    runner = BatchRunner(config, console=console)
    report = runner.run(dry_run=dry_run)

    if summary and not dry_run:
        _print_summary(report)

    if strict and report.failed:
        sys.exit(1)


@main.command("list")
@click.option("--issues-dir", default=None, help="Issues root directory.")
@click.option("--status", "status", default=None,
              type=click.Choice([s.value for s in IssueStatus]),
              help="Only show issues with this status.")
@click.pass_context
def list_issues(ctx: click.Context, issues_dir: Optional[str], status: Optional[str]) -> None:
    """Show every issue directory and its status."""
    config = _resolve_config(ctx, issues_dir=issues_dir)
    tracker = IssueTracker(
        Path(config.issues_dir),
        problem_file=config.problem_file,
        solution_file=config.solution_file,
    )
    issues = tracker.scan(IssueStatus(status) if status else None)

    if not issues:
        console.print("[dim]No issues found.[/dim]")
        return

    table = Table(title=f"Issues in {config.issues_dir}")
    table.add_column("Issue", style="cyan", no_wrap=True)
    table.add_column("Problem")
    table.add_column("Solution")
    table.add_column("Status")

    for i in issues:
        if i.status == IssueStatus.SOLVED:
            status_str = "[green]solved[/green]"
        elif i.status == IssueStatus.UNSOLVED:
            status_str = "[yellow]unsolved[/yellow]"
        else:
            status_str = "[dim]draft[/dim]"
        table.add_row(
            i.slug,
            "yes" if i.has_problem else "-",
            "yes" if i.has_solution else "-",
            status_str,
        )

    console.print(table)


@main.command()
@click.option("--dir", "directory", default=".", help="Directory to write the config into.")
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
def init(directory: str, force: bool) -> None:
    """Write a starter issue-solver.yaml with the default settings."""
    target = Path(directory) / CONFIG_FILENAME
    if target.exists() and not force:
        console.print(f"[red]Config already exists:[/red] {target} (use --force)")
        sys.exit(1)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(generate_config_yaml(SolverConfig()))
    console.print(f"[green]Config written:[/green] {target}")


if __name__ == "__main__":
    main()
