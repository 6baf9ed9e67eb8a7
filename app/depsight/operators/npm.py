"""npm-compatible package operator implementation.

Installs and uninstalls project dependencies with npm, pnpm, or yarn.
"""

import logging
from pathlib import Path

from depsight.core.config import PackageManager
from depsight.models.action import Action, ActionResult
from depsight.operators.base import Operator
from depsight.utils.shell import CommandResult, command_exists, format_command, run_command

logger = logging.getLogger(__name__)

# Subcommands per package manager: (install, uninstall)
_SUBCOMMANDS: dict[str, tuple[str, str]] = {
    "npm": ("install", "uninstall"),
    "pnpm": ("add", "remove"),
    "yarn": ("add", "remove"),
}


class NpmOperator(Operator):
    """Operator for npm, pnpm, and yarn projects.

    Commands run in the project directory. The whole batch succeeds or
    fails together, matching how the package manager applies it.

    Args:
        project_dir: Directory containing package.json.
        package_manager: Executable to run ("npm", "pnpm", or "yarn").
        dry_run: If True, only report the commands without executing them.
    """

    # Timeout for package manager runs (5 minutes)
    _TIMEOUT: float = 300.0

    def __init__(
        self,
        project_dir: Path,
        package_manager: PackageManager = "npm",
        dry_run: bool = False,
    ) -> None:
        super().__init__(dry_run=dry_run)
        self._project_dir = project_dir
        self._package_manager = package_manager

    @property
    def name(self) -> str:
        """Return the package manager executable."""
        return self._package_manager

    def is_available(self) -> bool:
        """Check if the package manager executable is on PATH."""
        return command_exists(self._package_manager)

    def build_command(self, actions: list[Action]) -> list[str]:
        """Build the package manager command line for a batch of actions.

        All actions must be of the same type.

        Args:
            actions: Update or remove actions.

        Returns:
            Command and arguments.

        Raises:
            ValueError: If the batch is empty or mixes action types.
        """
        if not actions:
            msg = "Cannot build a command for an empty action list"
            raise ValueError(msg)
        if len({a.action_type for a in actions}) > 1:
            msg = "Cannot mix update and remove actions in one command"
            raise ValueError(msg)

        install_cmd, uninstall_cmd = _SUBCOMMANDS[self._package_manager]
        subcommand = install_cmd if actions[0].is_update else uninstall_cmd
        return [self._package_manager, subcommand, *(a.spec for a in actions)]

    def install(self, actions: list[Action]) -> list[ActionResult]:
        """Install the target version of each package."""
        return self._run(actions)

    def remove(self, actions: list[Action]) -> list[ActionResult]:
        """Uninstall each package."""
        return self._run(actions)

    def _run(self, actions: list[Action]) -> list[ActionResult]:
        if not actions:
            return []

        args = self.build_command(actions)
        command_line = format_command(args)

        if self.dry_run:
            logger.info("Dry run, not executing: %s", command_line)
            return [
                ActionResult(action=a, success=True, message=f"Would run: {command_line}")
                for a in actions
            ]

        if not self.is_available():
            msg = f"{self._package_manager} is not available on this system"
            raise RuntimeError(msg)

        logger.info("Executing in %s: %s", self._project_dir, command_line)
        result = run_command(args, timeout=self._TIMEOUT, cwd=str(self._project_dir))
        return self._parse_result(result, actions)

    def _parse_result(
        self,
        result: CommandResult,
        actions: list[Action],
    ) -> list[ActionResult]:
        if result.success:
            return [
                ActionResult(action=a, success=True, message=f"Ran: {result.command_line}")
                for a in actions
            ]

        error_msg = result.stderr.strip() or f"{self._package_manager} command failed"
        return [ActionResult(action=a, success=False, error=error_msg) for a in actions]
