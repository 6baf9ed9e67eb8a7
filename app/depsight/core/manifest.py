"""Manifest file I/O operations.

This module reads the declared dependencies of a package.json and
rewrites the file when a dependency is removed.
"""

import json
import logging
import os
import stat
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from depsight.models.package import DeclaredPackage, DependencyScope

logger = logging.getLogger(__name__)

# Group read order is part of the output contract: runtime before development
SCOPE_ORDER: tuple[DependencyScope, ...] = (
    DependencyScope.RUNTIME,
    DependencyScope.DEVELOPMENT,
)


class ManifestError(Exception):
    """Base exception for manifest-related errors."""


class ManifestNotFoundError(ManifestError):
    """Raised when manifest file is not found."""


class ManifestParseError(ManifestError):
    """Raised when manifest file cannot be parsed."""


def _read_document(manifest_path: Path) -> dict[str, Any]:
    """Read and parse a manifest into its top-level object.

    Raises:
        ManifestNotFoundError: If the file doesn't exist.
        ManifestParseError: If the content is not a JSON object.
        ManifestError: If the file cannot be read.
    """
    if not manifest_path.exists():
        raise ManifestNotFoundError(f"Manifest not found: {manifest_path}")

    try:
        text = manifest_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ManifestParseError(f"Manifest is not valid UTF-8: {e}") from e
    except OSError as e:
        raise ManifestError(f"Failed to read manifest: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"Invalid JSON syntax: {e}") from e

    if not isinstance(data, dict):
        raise ManifestParseError(
            f"Manifest must be a JSON object, got {type(data).__name__}"
        )
    return data


def coerce_version_spec(value: object) -> str:
    """Convert a declared version value to its string form.

    Non-string values are stringified rather than rejected, using their
    JSON text (``true``, ``null``, ``2``).

    Args:
        value: Raw value from the manifest.

    Returns:
        Version spec as a string.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def extract_packages(data: dict[str, Any], manifest_path: str) -> list[DeclaredPackage]:
    """Extract declared packages from a parsed manifest.

    Reads ``dependencies`` then ``devDependencies``, each in declared
    order. A missing or non-object group contributes nothing.

    Args:
        data: Parsed manifest object.
        manifest_path: Path recorded on each package.

    Returns:
        Declared packages, runtime group first.
    """
    packages: list[DeclaredPackage] = []
    for scope in SCOPE_ORDER:
        group = data.get(scope.value)
        if not isinstance(group, dict):
            if group is not None:
                logger.debug("Ignoring non-object '%s' group in %s", scope.value, manifest_path)
            continue
        for name, version in group.items():
            if not name:
                logger.debug("Skipping entry with empty name in '%s'", scope.value)
                continue
            packages.append(
                DeclaredPackage(
                    name=name,
                    version_spec=coerce_version_spec(version),
                    scope=scope,
                    manifest_path=manifest_path,
                )
            )
    return packages


def load_manifest(path: Path) -> list[DeclaredPackage]:
    """Load the declared dependencies from a package.json.

    Args:
        path: Path to the manifest file.

    Returns:
        Declared packages in manifest order, runtime group first.

    Raises:
        ManifestNotFoundError: If the manifest file doesn't exist.
        ManifestParseError: If the content is not valid JSON.
        ManifestError: If the file cannot be read.
    """
    data = _read_document(path)
    packages = extract_packages(data, str(path))
    logger.debug("Loaded %d declared packages from %s", len(packages), path)
    return packages


def index_by_name(packages: Iterable[DeclaredPackage]) -> dict[str, DeclaredPackage]:
    """Index packages by name for name-keyed lookups.

    When a name is declared in both groups, the runtime entry wins
    regardless of iteration order.

    Args:
        packages: Declared packages.

    Returns:
        Dictionary of package name to DeclaredPackage.
    """
    index: dict[str, DeclaredPackage] = {}
    for pkg in packages:
        existing = index.get(pkg.name)
        if existing is not None and existing.scope == DependencyScope.RUNTIME:
            continue
        index[pkg.name] = pkg
    return index


def find_package(
    packages: Iterable[DeclaredPackage],
    name: str,
    scope: DependencyScope | None = None,
) -> DeclaredPackage | None:
    """Find a declared package by name.

    Args:
        packages: Declared packages to search.
        name: Package name.
        scope: Restrict the search to one group. If None, the runtime
            entry is preferred when the name appears in both.

    Returns:
        The matching DeclaredPackage, or None.
    """
    if scope is not None:
        return next((p for p in packages if p.name == name and p.scope == scope), None)
    return index_by_name(packages).get(name)


def dump_manifest(data: dict[str, Any]) -> str:
    """Serialize a manifest the way npm writes it.

    Two-space indentation and a trailing newline.
    """
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def remove_dependency(package: DeclaredPackage) -> Path:
    """Remove a dependency from the manifest that declares it.

    Only the entry in the package's own group is removed; every other
    field and key order is preserved. The file is written atomically and
    keeps its permissions. If the entry is already gone the file is left
    untouched.

    Args:
        package: The declared package to remove.

    Returns:
        Path of the rewritten manifest.

    Raises:
        ManifestNotFoundError: If the manifest no longer exists.
        ManifestParseError: If the manifest is not valid JSON.
        ManifestError: If the file cannot be written.
    """
    from tempfile import NamedTemporaryFile

    manifest_path = Path(package.manifest_path)
    data = _read_document(manifest_path)

    group = data.get(package.scope.value)
    if not isinstance(group, dict) or package.name not in group:
        logger.info(
            "%s is not declared in '%s' of %s, leaving it unchanged",
            package.name,
            package.scope.value,
            manifest_path,
        )
        return manifest_path
    del group[package.name]

    tmp_path: Path | None = None
    try:
        mode = stat.S_IMODE(manifest_path.stat().st_mode)
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=manifest_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            f.write(dump_manifest(data))
        # Temp files are created 0600; keep the manifest's own permissions
        os.chmod(tmp_path, mode)
        os.replace(str(tmp_path), str(manifest_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ManifestError(f"Failed to write manifest: {e}") from e

    return manifest_path
