"""Unit tests for the CLI entry point."""

import logging

from depsight import __version__
from depsight.cli.main import app, configure_logging
from typer.testing import CliRunner

runner = CliRunner()


class TestMain:
    """Tests for global options."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"depsight version {__version__}" in result.output

    def test_help_lists_commands(self) -> None:
        """--help lists every command."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("list", "info", "update", "remove", "config"):
            assert command in result.output


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_verbose_enables_debug(self) -> None:
        """--verbose lowers the root level to DEBUG."""
        configure_logging(verbose=True, quiet=False)

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_quiet_shows_errors_only(self) -> None:
        """--quiet raises the root level to ERROR."""
        configure_logging(verbose=False, quiet=True)

        assert logging.getLogger().level == logging.ERROR
        assert logging.getLogger("httpx").level == logging.WARNING
