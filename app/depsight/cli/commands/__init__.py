"""CLI commands for depsight.

This package contains all subcommand implementations.
"""

from depsight.cli.commands import config, info, inventory, remove, update

__all__ = ["config", "info", "inventory", "remove", "update"]
