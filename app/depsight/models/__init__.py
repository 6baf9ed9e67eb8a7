"""Data models for depsight.

This module exports the core data structures used throughout the application.
"""

from depsight.models.action import (
    Action,
    ActionResult,
    ActionType,
    create_remove_action,
    create_update_action,
)
from depsight.models.inventory import InventoryReport
from depsight.models.package import (
    DeclaredPackage,
    DependencyScope,
    PackageReport,
    RegistryMetadata,
)

__all__ = [
    "Action",
    "ActionResult",
    "ActionType",
    "DeclaredPackage",
    "DependencyScope",
    "InventoryReport",
    "PackageReport",
    "RegistryMetadata",
    "create_remove_action",
    "create_update_action",
]
