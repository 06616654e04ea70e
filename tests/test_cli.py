"""Tests for Issue Solver CLI commands: solve, list, init."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml
from click.testing import CliRunner

from issuesolver.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("ISSUE_SOLVER_ISSUES_DIR", raising=False)
    monkeypatch.delenv("ISSUE_SOLVER_COMMAND", raising=False)


@pytest.fixture
def issues_root(tmp_path):
    """A: problem only, B: problem+solution, C: neither, D: solution only."""
    root = tmp_path / "issues"
    root.mkdir()
    for name, files in {
        "A": ["problem.md"],
        "B": ["problem.md", "solution.md"],
        "C": [],
        "D": ["solution.md"],
    }.items():
        (root / name).mkdir()
        for f in files:
            (root / name / f).write_text("x")
    return root


class TestSolveCommand:
    def test_solve_runs_only_unsolved(self, runner, issues_root):
        with patch("issuesolver.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            result = runner.invoke(main, ["solve", "--issues-dir", str(issues_root)])

        assert result.exit_code == 0, result.output
        assert mock_run.call_count == 1
        argv = mock_run.call_args.args[0]
        assert argv[0] == "claude"
        assert argv[3] == f"/go-k8s:solve {issues_root / 'A'}"
        assert "Found 1 unsolved issues" in result.output
        assert "=== Processing unsolved issue: A ===" in result.output
        assert "All unsolved issues processed!" in result.output

    def test_solve_empty_root(self, runner, tmp_path):
        root = tmp_path / "issues"
        root.mkdir()
        with patch("issuesolver.runner.subprocess.run") as mock_run:
            result = runner.invoke(main, ["solve", "--issues-dir", str(root)])

        assert result.exit_code == 0
        mock_run.assert_not_called()
        assert "Found 0 unsolved issues" in result.output

    def test_solve_uses_env_issues_dir(self, runner, issues_root):
        with patch("issuesolver.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            result = runner.invoke(main, ["solve"],
                                   env={"ISSUE_SOLVER_ISSUES_DIR": str(issues_root)})
        assert result.exit_code == 0
        assert mock_run.call_count == 1

    def test_failure_exits_zero_by_default(self, runner, issues_root):
        with patch("issuesolver.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1)
            result = runner.invoke(main, ["solve", "--issues-dir", str(issues_root)])
        assert result.exit_code == 0
        assert "All unsolved issues processed!" in result.output

    def test_strict_exits_one_on_failure(self, runner, issues_root):
        with patch("issuesolver.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1)
            result = runner.invoke(main, ["solve", "--issues-dir", str(issues_root), "--strict"])
        assert result.exit_code == 1

    def test_summary_table(self, runner, issues_root):
        with patch("issuesolver.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=2)
            result = runner.invoke(main, ["solve", "--issues-dir", str(issues_root), "--summary"])
        assert result.exit_code == 0
        assert "Batch Summary" in result.output
        assert "failed" in result.output
        assert "Failed: 1" in result.output

    def test_dry_run(self, runner, issues_root):
        with patch("issuesolver.runner.subprocess.run") as mock_run:
            result = runner.invoke(main, ["solve", "--issues-dir", str(issues_root),
                                          "--dry-run", "--command", "my-cli"])
        assert result.exit_code == 0
        mock_run.assert_not_called()
        assert "my-cli --print" in result.output

    def test_bad_workflow_exits_1(self, runner, issues_root):
        result = runner.invoke(main, ["solve", "--issues-dir", str(issues_root),
                                      "--workflow", "no placeholder"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_missing_config_file_exits_1(self, runner, tmp_path):
        result = runner.invoke(main, ["--config", str(tmp_path / "missing.yaml"), "solve"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_malformed_config_file_exits_1(self, runner, tmp_path):
        config = tmp_path / "solver.yaml"
        config.write_text("issues_dir: [unclosed\n")
        result = runner.invoke(main, ["--config", str(config), "solve"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "not valid YAML" in result.output

    def test_misspelled_config_key_exits_1(self, runner, tmp_path):
        config = tmp_path / "solver.yaml"
        config.write_text("isues_dir: tickets\n")
        result = runner.invoke(main, ["--config", str(config), "solve"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_config_file_is_used(self, runner, issues_root, tmp_path):
        config = tmp_path / "solver.yaml"
        config.write_text(f"issues_dir: {issues_root}\ncommand: from-config\n")
        with patch("issuesolver.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            result = runner.invoke(main, ["--config", str(config), "solve"])
        assert result.exit_code == 0
        assert mock_run.call_args.args[0][0] == "from-config"


class TestListCommand:
    def test_list_shows_statuses(self, runner, issues_root):
        result = runner.invoke(main, ["list", "--issues-dir", str(issues_root)])
        assert result.exit_code == 0
        assert "unsolved" in result.output
        assert "solved" in result.output
        assert "draft" in result.output

    def test_list_filter(self, runner, issues_root):
        result = runner.invoke(main, ["list", "--issues-dir", str(issues_root),
                                      "--status", "solved"])
        assert result.exit_code == 0
        assert "B" in result.output
        assert "unsolved" not in result.output

    def test_list_empty(self, runner, tmp_path):
        result = runner.invoke(main, ["list", "--issues-dir", str(tmp_path / "nothing")])
        assert result.exit_code == 0
        assert "No issues found" in result.output


class TestInitCommand:
    def test_init_writes_config(self, runner, tmp_path):
        result = runner.invoke(main, ["init", "--dir", str(tmp_path)])
        assert result.exit_code == 0
        data = yaml.safe_load((tmp_path / "issue-solver.yaml").read_text())
        assert data["issues_dir"] == "issues"
        assert data["command"] == "claude"

    def test_init_refuses_overwrite(self, runner, tmp_path):
        (tmp_path / "issue-solver.yaml").write_text("issues_dir: keep\n")
        result = runner.invoke(main, ["init", "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert "keep" in (tmp_path / "issue-solver.yaml").read_text()

    def test_init_force(self, runner, tmp_path):
        (tmp_path / "issue-solver.yaml").write_text("issues_dir: keep\n")
        result = runner.invoke(main, ["init", "--dir", str(tmp_path), "--force"])
        assert result.exit_code == 0
        assert "keep" not in (tmp_path / "issue-solver.yaml").read_text()


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
