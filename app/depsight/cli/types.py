"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer

from depsight.core.config import ConfigError, DepsightConfig, load_config
from depsight.core.inventory import InventoryEngine
from depsight.core.manifest import (
    ManifestError,
    ManifestNotFoundError,
    find_package,
    load_manifest,
)
from depsight.core.paths import get_manifest_path
from depsight.models.package import DeclaredPackage, DependencyScope
from depsight.utils.formatting import print_error, print_info


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def require_config() -> DepsightConfig:
    """Load settings or exit with a helpful error message.

    Returns:
        Loaded DepsightConfig.

    Raises:
        typer.Exit: If the configuration is invalid.
    """
    try:
        return load_config()
    except ConfigError as e:
        print_error(str(e))
        print_info("Fix the file or run 'depsight config init --force' to reset it.")
        raise typer.Exit(code=1) from e


def create_engine(config: DepsightConfig) -> InventoryEngine:
    """Create an inventory engine for a single CLI invocation."""
    return InventoryEngine(config)


def require_package(
    project_dir: Path,
    name: str,
    scope: DependencyScope | None = None,
) -> DeclaredPackage:
    """Resolve a declared package by name or exit with an error.

    Args:
        project_dir: Project directory containing package.json.
        name: Package name.
        scope: Restrict lookup to one group; runtime wins otherwise.

    Returns:
        The declared package.

    Raises:
        typer.Exit: If the manifest cannot be read or the package is not declared.
    """
    manifest_path = get_manifest_path(project_dir)
    try:
        packages = load_manifest(manifest_path)
    except ManifestNotFoundError as e:
        print_error(f"Manifest not found: {manifest_path}")
        raise typer.Exit(code=1) from e
    except ManifestError as e:
        print_error(f"Failed to load manifest: {e}")
        raise typer.Exit(code=1) from e

    package = find_package(packages, name, scope)
    if package is None:
        where = scope.value if scope is not None else "package.json"
        print_error(f"'{name}' is not declared in {where} ({manifest_path})")
        raise typer.Exit(code=1)
    return package
