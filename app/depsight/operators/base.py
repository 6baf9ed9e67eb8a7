"""Abstract base class for package operators.

This module defines the Operator interface used to apply dependency
actions through a package manager.
"""

from abc import ABC, abstractmethod

from depsight.models.action import Action, ActionResult


class Operator(ABC):
    """Abstract base class for all package operators.

    Operators execute dependency actions (update, remove) for a
    project using a specific package manager.

    Attributes:
        dry_run: If True, only report the commands without executing them.

    Example:
        >>> operator = NpmOperator(Path("."), dry_run=True)
        >>> if operator.is_available():
        ...     results = operator.remove([create_remove_action("left-pad")])
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the operator.

        Args:
            dry_run: If True, only report the commands without executing them.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the package manager executable this operator drives."""

    @abstractmethod
    def install(self, actions: list[Action]) -> list[ActionResult]:
        """Install the target versions of one or more packages.

        Args:
            actions: Update actions carrying package and version.

        Returns:
            List of ActionResult for each action.

        Raises:
            RuntimeError: If the package manager is not available.
        """

    @abstractmethod
    def remove(self, actions: list[Action]) -> list[ActionResult]:
        """Uninstall one or more packages.

        Args:
            actions: Remove actions.

        Returns:
            List of ActionResult for each action.

        Raises:
            RuntimeError: If the package manager is not available.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system.

        Returns:
            True if the package manager can be used, False otherwise.
        """

    def execute(self, actions: list[Action]) -> list[ActionResult]:
        """Execute a list of actions.

        Dispatches actions to install or remove by action type.

        Args:
            actions: List of Action objects to execute.

        Returns:
            List of ActionResult for each action.

        Raises:
            RuntimeError: If the package manager is not available.
        """
        if not self.dry_run and not self.is_available():
            msg = f"{self.name} is not available on this system"
            raise RuntimeError(msg)

        updates = [a for a in actions if a.is_update]
        removals = [a for a in actions if a.is_remove]

        results: list[ActionResult] = []
        if updates:
            results.extend(self.install(updates))
        if removals:
            results.extend(self.remove(removals))
        return results
