"""Unit tests for the remove command."""

import json
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

from depsight.cli.main import app
from depsight.utils.shell import CommandResult
from typer.testing import CliRunner

runner = CliRunner()


def _manifest(project: Path) -> dict[str, dict[str, str]]:
    return json.loads((project / "package.json").read_text())


class TestRemove:
    """Tests for depsight remove."""

    def test_removes_entry_without_uninstall(self, project: Path) -> None:
        """--no-uninstall only edits package.json."""
        result = runner.invoke(app, ["remove", "left-pad", str(project), "-y", "--no-uninstall"])

        assert result.exit_code == 0
        assert "left-pad" not in _manifest(project)["dependencies"]
        assert "react" in _manifest(project)["dependencies"]

    @patch("depsight.operators.npm.command_exists", return_value=True)
    @patch("depsight.operators.npm.run_command")
    def test_removes_and_uninstalls(
        self, mock_run: MagicMock, mock_exists: MagicMock, project: Path
    ) -> None:
        """By default the package manager uninstalls the package too."""
        mock_run.return_value = CommandResult(("npm", "uninstall", "left-pad"), "", "", 0)

        result = runner.invoke(app, ["remove", "left-pad", str(project), "--yes"])

        assert result.exit_code == 0
        assert mock_run.call_args[0][0] == ["npm", "uninstall", "left-pad"]
        assert "left-pad" not in _manifest(project)["dependencies"]

    def test_dev_flag_targets_dev_dependencies(self, write_project: Callable[..., Path]) -> None:
        """--dev removes the devDependencies entry of a duplicated name."""
        project = write_project(
            {"dependencies": {"react": "^18.0.0"}, "devDependencies": {"react": "^17.0.0"}}
        )

        result = runner.invoke(
            app, ["remove", "react", str(project), "--dev", "-y", "--no-uninstall"]
        )

        assert result.exit_code == 0
        assert _manifest(project) == {"dependencies": {"react": "^18.0.0"}, "devDependencies": {}}

    def test_dry_run_leaves_manifest(self, project: Path) -> None:
        """--dry-run describes the change without writing."""
        before = (project / "package.json").read_text()

        result = runner.invoke(app, ["remove", "lodash", str(project), "--dry-run"])

        assert result.exit_code == 0
        assert "Would run: npm uninstall lodash" in result.output
        assert (project / "package.json").read_text() == before

    def test_confirmation_declined(self, project: Path) -> None:
        """Answering no keeps the dependency."""
        result = runner.invoke(
            app, ["remove", "lodash", str(project), "--no-uninstall"], input="n\n"
        )

        assert result.exit_code == 0
        assert "Aborted." in result.output
        assert "lodash" in _manifest(project)["dependencies"]

    def test_confirmation_accepted(self, project: Path) -> None:
        """Answering yes removes the dependency."""
        result = runner.invoke(
            app, ["remove", "lodash", str(project), "--no-uninstall"], input="y\n"
        )

        assert result.exit_code == 0
        assert "lodash" not in _manifest(project)["dependencies"]

    def test_undeclared_package(self, project: Path) -> None:
        """Removing an undeclared package is an error."""
        result = runner.invoke(app, ["remove", "vue", str(project), "-y"])

        assert result.exit_code == 1
        assert "not declared" in result.output
