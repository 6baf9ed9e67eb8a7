"""Registry metadata service.

Resolves description, homepage, and latest version for a package from
an npm-compatible registry, caching every outcome for the lifetime of
the service.
"""

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx

from depsight.core.config import (
    DEFAULT_CONCURRENCY,
    DEFAULT_REGISTRY_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    DepsightConfig,
)
from depsight.core.version import version_sort_key
from depsight.models.package import RegistryMetadata
from depsight.registry.cache import MetadataCache

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves untouched besides quote()'s defaults
_URI_COMPONENT_SAFE = "!*'()"


class RegistryError(Exception):
    """Raised when a registry document cannot be fetched or decoded."""


def _text(entry: dict[str, Any] | None, key: str) -> str | None:
    if entry is None:
        return None
    value = entry.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def find_fallback_entry(versions: dict[str, Any]) -> dict[str, Any] | None:
    """Find the highest version that carries a description or homepage.

    Args:
        versions: Per-version map from a registry document.

    Returns:
        The qualifying version entry, or None.
    """
    for key in sorted(versions, key=version_sort_key, reverse=True):
        candidate = versions[key]
        if not isinstance(candidate, dict):
            continue
        if _text(candidate, "description") or _text(candidate, "homepage"):
            return candidate
    return None


def parse_registry_document(document: dict[str, Any], name: str = "") -> RegistryMetadata:
    """Build RegistryMetadata from a registry package document.

    The version tagged 'latest' is the primary source. Each field missing
    there falls back to the highest version that has a description or
    homepage, then to the document's top-level value.

    Args:
        document: Decoded registry response body.
        name: Package name, used for logging only.

    Returns:
        RegistryMetadata for the package.
    """
    dist_tags = document.get("dist-tags")
    latest_tag = dist_tags.get("latest") if isinstance(dist_tags, dict) else None
    if not isinstance(latest_tag, str) or not latest_tag:
        latest_tag = None

    raw_versions = document.get("versions")
    versions: dict[str, Any] = raw_versions if isinstance(raw_versions, dict) else {}

    primary: dict[str, Any] | None = None
    if latest_tag is not None and isinstance(versions.get(latest_tag), dict):
        primary = versions[latest_tag]
    logger.debug("Latest tag for %s: %s (entry found: %s)", name, latest_tag, primary is not None)

    description = _text(primary, "description")
    homepage = _text(primary, "homepage")

    if description is None or homepage is None:
        fallback = find_fallback_entry(versions)
        logger.debug("Fallback candidate for %s: %s", name, fallback is not None)
        description = description or _text(fallback, "description")
        homepage = homepage or _text(fallback, "homepage")

    return RegistryMetadata(
        description=description or _text(document, "description"),
        homepage=homepage or _text(document, "homepage"),
        latest_version=latest_tag,
    )


class MetadataService:
    """Cache-first registry metadata lookups.

    Every outcome is cached by package name, including failures (as None),
    so a package is fetched at most once per service lifetime. Concurrent
    requests for the same name share one fetch.

    Args:
        cache: Cache to use. A fresh cache is created if None.
        registry_url: Registry base URL.
        user_agent: User-Agent header for requests.
        timeout: Per-request timeout in seconds.
        concurrency: Maximum number of requests in flight.
        client: HTTP client to use. If None, one is created on first use
            and closed by aclose().

    Example:
        >>> async with MetadataService() as service:
        ...     metadata = await service.get_metadata("react")
    """

    def __init__(
        self,
        cache: MetadataCache | None = None,
        *,
        registry_url: str = DEFAULT_REGISTRY_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        concurrency: int = DEFAULT_CONCURRENCY,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._cache = cache if cache is not None else MetadataCache()
        self._registry_url = registry_url.rstrip("/")
        self._user_agent = user_agent
        self._timeout = timeout
        self._semaphore = asyncio.Semaphore(concurrency)
        self._client = client
        self._owns_client = client is None
        self._inflight: dict[str, asyncio.Task[RegistryMetadata | None]] = {}

    @classmethod
    def from_config(
        cls,
        config: DepsightConfig,
        *,
        cache: MetadataCache | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "MetadataService":
        """Create a service from depsight settings."""
        return cls(
            cache,
            registry_url=config.registry_url,
            user_agent=config.user_agent,
            timeout=config.timeout_seconds,
            concurrency=config.concurrency,
            client=client,
        )

    @property
    def cache(self) -> MetadataCache:
        """The cache owned by this service."""
        return self._cache

    def package_url(self, name: str) -> str:
        """Return the registry document URL for a package."""
        return f"{self._registry_url}/{quote(name, safe=_URI_COMPONENT_SAFE)}"

    async def get_metadata(self, name: str) -> RegistryMetadata | None:
        """Return metadata for a package, fetching it on first request.

        Never raises for network or registry problems: any failure is
        cached and returned as None.

        Args:
            name: Package name.

        Returns:
            RegistryMetadata, or None if it could not be fetched.
        """
        if name in self._cache:
            return self._cache.get(name)

        task = self._inflight.get(name)
        if task is None:
            task = asyncio.ensure_future(self._load(name))
            self._inflight[name] = task
            task.add_done_callback(lambda done: self._forget(name, done))
        # Shield so one cancelled caller does not cancel the shared fetch
        return await asyncio.shield(task)

    async def fetch(self, name: str) -> RegistryMetadata:
        """Fetch and parse a package document, bypassing the cache.

        Args:
            name: Package name.

        Returns:
            RegistryMetadata for the package.

        Raises:
            RegistryError: On HTTP status >= 400 or a malformed body.
            httpx.HTTPError: On transport errors and timeouts.
        """
        client = self._get_client()
        async with self._semaphore:
            response = await client.get(
                self.package_url(name),
                headers={"Accept": "application/json", "User-Agent": self._user_agent},
                timeout=self._timeout,
            )

        if response.status_code >= 400:
            raise RegistryError(f"Failed to fetch metadata ({response.status_code})")

        try:
            document = response.json()
        except ValueError as e:
            raise RegistryError(f"Malformed registry response: {e}") from e

        if not isinstance(document, dict):
            raise RegistryError("Malformed registry response: expected a JSON object")

        try:
            return parse_registry_document(document, name)
        except ValueError as e:
            raise RegistryError(f"Malformed registry response: {e}") from e

    async def aclose(self) -> None:
        """Clear the cache and close the HTTP client if this service created it."""
        self._cache.clear()
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "MetadataService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _load(self, name: str) -> RegistryMetadata | None:
        metadata: RegistryMetadata | None
        try:
            metadata = await self.fetch(name)
        except (httpx.HTTPError, httpx.InvalidURL, RegistryError) as e:
            logger.warning("Metadata lookup failed for %s: %s", name, e)
            metadata = None
        self._cache.set(name, metadata)
        return metadata

    def _forget(self, name: str, task: asyncio.Task[RegistryMetadata | None]) -> None:
        if self._inflight.get(name) is task:
            del self._inflight[name]

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        return self._client
