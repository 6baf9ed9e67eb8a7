"""Package models for dependency inventory.

This module defines the core data structures for representing
declared dependencies, registry metadata, and per-package reports.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DependencyScope(Enum):
    """Manifest group a dependency is declared in.

    The value is the key of the group in package.json.
    """

    RUNTIME = "dependencies"
    DEVELOPMENT = "devDependencies"

    @property
    def label(self) -> str:
        """Short human-readable label for the scope."""
        return "dev" if self is DependencyScope.DEVELOPMENT else "runtime"


@dataclass(frozen=True, slots=True)
class DeclaredPackage:
    """A dependency declared in a manifest.

    Identity is ``(manifest_path, name)``. The version spec is kept
    verbatim for display; comparisons use its normalized form.

    Attributes:
        name: Package name (e.g., 'react', '@types/node').
        version_spec: Version specifier as written (e.g., '^18.2.0').
        scope: Manifest group the package was declared in.
        manifest_path: Path of the manifest that declares the package.
    """

    name: str
    version_spec: str
    scope: DependencyScope
    manifest_path: str

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    @property
    def is_dev(self) -> bool:
        """Check if package is a development dependency."""
        return self.scope == DependencyScope.DEVELOPMENT


@dataclass(frozen=True, slots=True)
class RegistryMetadata:
    """Metadata resolved from the package registry.

    Attributes:
        description: Package description, if published.
        homepage: Project homepage URL, if published.
        latest_version: Version the registry tags as 'latest'.
    """

    description: str | None = None
    homepage: str | None = None
    latest_version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "description": self.description,
            "homepage": self.homepage,
            "latest_version": self.latest_version,
        }


@dataclass(frozen=True, slots=True)
class PackageReport:
    """Inventory result for a single declared package.

    Plain data record handed to the presentation layer. It carries no
    rendering concerns.

    Attributes:
        name: Package name.
        scope: Manifest group of the package.
        current_version: Version spec exactly as declared.
        normalized_current: Declared version without range operators.
        latest_version: Latest version reported by the registry.
        normalized_latest: Latest version without range operators.
        is_used: Whether any scanned source file references the package.
        is_outdated: Whether the latest version is newer than the declared one.
        description: Package description from the registry.
        homepage: Homepage URL from the registry.
        manifest_path: Path of the manifest that declares the package.
    """

    name: str
    scope: DependencyScope
    current_version: str
    normalized_current: str | None
    latest_version: str | None
    normalized_latest: str | None
    is_used: bool
    is_outdated: bool
    description: str | None = field(default=None)
    homepage: str | None = field(default=None)
    manifest_path: str = field(default="")

    @property
    def display_version(self) -> str:
        """Return the version string shown in listings."""
        return self.normalized_current or self.current_version

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "scope": self.scope.value,
            "current_version": self.current_version,
            "latest_version": self.latest_version,
            "used": self.is_used,
            "outdated": self.is_outdated,
            "description": self.description,
            "homepage": self.homepage,
            "manifest_path": self.manifest_path,
        }
