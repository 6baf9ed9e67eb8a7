"""Utility modules for depsight.

This module exports commonly used utility functions.
"""

from depsight.utils.formatting import (
    console,
    create_dependency_table,
    err_console,
    format_dependency_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from depsight.utils.shell import CommandResult, command_exists, format_command, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_dependency_table",
    "err_console",
    "format_command",
    "format_dependency_row",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
