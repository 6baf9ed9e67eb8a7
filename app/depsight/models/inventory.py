"""Inventory report model for display and JSON export.

This module defines the result of a single inventory refresh,
including the placeholder form used when no packages can be listed.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from depsight.models.package import DependencyScope, PackageReport

# Placeholder messages shown instead of a package list
MSG_MANIFEST_NOT_FOUND = "package.json not found."
MSG_MANIFEST_INVALID = "Failed to load dependency information."
MSG_NO_DEPENDENCIES = "No dependencies declared."


@dataclass(frozen=True, slots=True)
class InventoryReport:
    """Complete result of an inventory refresh.

    When the manifest cannot be read, ``packages`` is empty and
    ``message`` holds a single explanatory placeholder.

    Attributes:
        project_dir: Directory that was inventoried.
        manifest_path: Manifest file that was read.
        packages: Per-package results in manifest order.
        message: Placeholder text when there is nothing to list.
        generated_at: ISO format timestamp of the refresh.
    """

    project_dir: str
    manifest_path: str
    packages: list[PackageReport] = field(default_factory=lambda: [])
    message: str | None = None
    generated_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    @classmethod
    def placeholder(cls, project_dir: str, manifest_path: str, message: str) -> "InventoryReport":
        """Create a report that carries only an explanatory message.

        Args:
            project_dir: Directory that was inventoried.
            manifest_path: Manifest file that was attempted.
            message: Text to show in place of the package list.

        Returns:
            InventoryReport with no packages.
        """
        return cls(project_dir=project_dir, manifest_path=manifest_path, message=message)

    @property
    def is_placeholder(self) -> bool:
        """Check if this report carries a message instead of packages."""
        return self.message is not None and not self.packages

    @property
    def outdated(self) -> list[PackageReport]:
        """Packages with a newer published version."""
        return [p for p in self.packages if p.is_outdated]

    @property
    def unused(self) -> list[PackageReport]:
        """Packages not referenced by any scanned source file."""
        return [p for p in self.packages if not p.is_used]

    @property
    def summary(self) -> dict[str, int]:
        """Package counts by state and scope."""
        runtime = sum(1 for p in self.packages if p.scope == DependencyScope.RUNTIME)
        return {
            "total": len(self.packages),
            "runtime": runtime,
            "development": len(self.packages) - runtime,
            "outdated": len(self.outdated),
            "unused": len(self.unused),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        from depsight import __version__

        return {
            "metadata": {
                "timestamp": self.generated_at,
                "project_dir": self.project_dir,
                "manifest_path": self.manifest_path,
                "depsight_version": __version__,
            },
            "message": self.message,
            "packages": [pkg.to_dict() for pkg in self.packages],
            "summary": self.summary,
        }
