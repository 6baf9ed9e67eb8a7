"""Action models for dependency operations.

This module defines data structures for representing package manager
actions (update, remove) and their execution results.
"""

from dataclasses import dataclass
from enum import Enum


class ActionType(Enum):
    """Type of dependency action.

    Attributes:
        UPDATE: Install a specific (usually the latest) version of a package.
        REMOVE: Uninstall a package from the project.
    """

    UPDATE = "update"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class Action:
    """Represents a single package manager action to be executed.

    Attributes:
        action_type: The type of action (update or remove).
        package: Name of the package to operate on.
        version: Target version for updates, None for removals.
        reason: Optional explanation for why this action is being taken.
    """

    action_type: ActionType
    package: str
    version: str | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if not self.package:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if self.action_type == ActionType.UPDATE and not self.version:
            msg = f"Update action for {self.package} requires a target version"
            raise ValueError(msg)

    @property
    def is_update(self) -> bool:
        """Check if this is an update action."""
        return self.action_type == ActionType.UPDATE

    @property
    def is_remove(self) -> bool:
        """Check if this is a remove action."""
        return self.action_type == ActionType.REMOVE

    @property
    def spec(self) -> str:
        """Return the package argument passed to the package manager."""
        if self.version:
            return f"{self.package}@{self.version}"
        return self.package


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of executing a dependency action.

    Attributes:
        action: The action that was executed.
        success: Whether the action completed successfully.
        message: Optional success message or additional information.
        error: Optional error message if the action failed.
    """

    action: Action
    success: bool
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success


def create_update_action(package: str, version: str, reason: str | None = None) -> Action:
    """Create an update action for a package.

    Args:
        package: Name of the package to update.
        version: Version to install.
        reason: Optional explanation for the update.

    Returns:
        Action configured for update.
    """
    return Action(action_type=ActionType.UPDATE, package=package, version=version, reason=reason)


def create_remove_action(package: str, reason: str | None = None) -> Action:
    """Create a remove action for a package.

    Args:
        package: Name of the package to remove.
        reason: Optional explanation for the removal.

    Returns:
        Action configured for removal.
    """
    return Action(action_type=ActionType.REMOVE, package=package, reason=reason)
