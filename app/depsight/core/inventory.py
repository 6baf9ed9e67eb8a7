"""Dependency inventory engine.

Combines the manifest reader, usage scanner, metadata service, and
version comparator into a single refresh operation that produces one
InventoryReport per call.
"""

import asyncio
import logging
from pathlib import Path

from depsight.core.config import DepsightConfig
from depsight.core.manifest import (
    ManifestError,
    ManifestNotFoundError,
    load_manifest,
)
from depsight.core.paths import get_manifest_path
from depsight.core.version import is_outdated, normalize_version
from depsight.models.inventory import (
    MSG_MANIFEST_INVALID,
    MSG_MANIFEST_NOT_FOUND,
    MSG_NO_DEPENDENCIES,
    InventoryReport,
)
from depsight.models.package import DeclaredPackage, PackageReport, RegistryMetadata
from depsight.registry.metadata import MetadataService
from depsight.scanners.usage import UsageScanner

logger = logging.getLogger(__name__)


def build_report(
    package: DeclaredPackage,
    metadata: RegistryMetadata | None,
    is_used: bool,
) -> PackageReport:
    """Combine a declared package with its usage and registry data.

    Args:
        package: The declared package.
        metadata: Registry metadata, or None if unavailable.
        is_used: Whether the package is referenced in source.

    Returns:
        PackageReport with outdated status computed.
    """
    latest = metadata.latest_version if metadata is not None else None
    return PackageReport(
        name=package.name,
        scope=package.scope,
        current_version=package.version_spec,
        normalized_current=normalize_version(package.version_spec),
        latest_version=latest,
        normalized_latest=normalize_version(latest),
        is_used=is_used,
        is_outdated=is_outdated(package.version_spec, latest),
        description=metadata.description if metadata is not None else None,
        homepage=metadata.homepage if metadata is not None else None,
        manifest_path=package.manifest_path,
    )


class InventoryEngine:
    """Produces dependency inventories for project directories.

    The engine owns a MetadataService (and through it a metadata cache)
    that lives until the engine is closed, so repeated refreshes reuse
    registry lookups while manifest and usage data are recomputed.

    Args:
        config: Settings. Defaults are used if None.
        metadata_service: Service for registry lookups. Built from config
            if None.
        usage_scanner: Scanner for source usage. Built from config if None.

    Example:
        >>> async with InventoryEngine() as engine:
        ...     report = await engine.refresh(Path("."))
    """

    def __init__(
        self,
        config: DepsightConfig | None = None,
        *,
        metadata_service: MetadataService | None = None,
        usage_scanner: UsageScanner | None = None,
    ) -> None:
        self._config = config or DepsightConfig()
        self._metadata = metadata_service or MetadataService.from_config(self._config)
        self._scanner = usage_scanner or UsageScanner(
            extensions=self._config.source_extensions,
            excluded_dirs=self._config.excluded_dirs,
        )

    @property
    def config(self) -> DepsightConfig:
        """Settings this engine was built with."""
        return self._config

    @property
    def metadata_service(self) -> MetadataService:
        """The metadata service owned by this engine."""
        return self._metadata

    async def get_metadata(self, name: str) -> RegistryMetadata | None:
        """Look up registry metadata for a single package (cached)."""
        return await self._metadata.get_metadata(name)

    async def refresh(self, project_dir: Path) -> InventoryReport:
        """Build a fresh inventory for a project.

        Manifest problems produce a placeholder report instead of an
        exception. A failed metadata lookup affects only its own package.

        Args:
            project_dir: Root directory containing package.json.

        Returns:
            InventoryReport for the project.
        """
        manifest_path = get_manifest_path(project_dir)

        try:
            packages = load_manifest(manifest_path)
        except ManifestNotFoundError:
            logger.info("No manifest at %s", manifest_path)
            return InventoryReport.placeholder(
                str(project_dir), str(manifest_path), MSG_MANIFEST_NOT_FOUND
            )
        except ManifestError as e:
            logger.warning("Cannot load %s: %s", manifest_path, e)
            return InventoryReport.placeholder(
                str(project_dir), str(manifest_path), MSG_MANIFEST_INVALID
            )

        if not packages:
            return InventoryReport.placeholder(
                str(project_dir), str(manifest_path), MSG_NO_DEPENDENCIES
            )

        names = list(dict.fromkeys(pkg.name for pkg in packages))
        used = await self._scanner.scan_async(names, project_dir)
        metadata = await self._gather_metadata(names)

        reports = [build_report(pkg, metadata.get(pkg.name), pkg.name in used) for pkg in packages]
        return InventoryReport(
            project_dir=str(project_dir),
            manifest_path=str(manifest_path),
            packages=reports,
        )

    async def aclose(self) -> None:
        """Release the metadata service and its cache."""
        await self._metadata.aclose()

    async def __aenter__(self) -> "InventoryEngine":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _gather_metadata(self, names: list[str]) -> dict[str, RegistryMetadata | None]:
        results = await asyncio.gather(
            *(self._metadata.get_metadata(name) for name in names),
            return_exceptions=True,
        )
        metadata: dict[str, RegistryMetadata | None] = {}
        for name, result in zip(names, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning("Metadata lookup for %s raised: %s", name, result)
                metadata[name] = None
            else:
                metadata[name] = result
        return metadata
