"""Subprocess helpers for running package manager commands."""

import shlex
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one external command.

    Attributes:
        args: Command and arguments that were run.
        stdout: Captured standard output.
        stderr: Captured standard error.
        returncode: Exit code, or -1 if the command never finished.
    """

    args: tuple[str, ...]
    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        """The command as it would be typed in a shell."""
        return format_command(self.args)


def format_command(args: Sequence[str]) -> str:
    """Quote arguments into a single shell-style command line."""
    return shlex.join(args)


def run_command(
    args: Sequence[str],
    *,
    timeout: float | None = 60.0,
    cwd: str | None = None,
) -> CommandResult:
    """Run a command with captured text output.

    A timeout is reported as a failed result rather than raised.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        FileNotFoundError: If command executable is not found.
    """
    argv = tuple(args)
    try:
        completed = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            args=argv,
            stdout="",
            stderr=f"{argv[0]} timed out after {timeout:.0f}s",
            returncode=-1,
        )
    return CommandResult(
        args=argv,
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH."""
    return shutil.which(name) is not None
