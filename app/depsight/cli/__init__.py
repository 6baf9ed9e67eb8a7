"""CLI package for depsight.

This package contains the Typer application and all subcommands.
"""

from depsight.cli.main import app

__all__ = ["app"]
