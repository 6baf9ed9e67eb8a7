"""In-memory metadata cache.

One cache belongs to one MetadataService (and so to one engine). Entries
are keyed by package name only and may hold None to remember that a
lookup failed.
"""

from depsight.models.package import RegistryMetadata


class MetadataCache:
    """Name-keyed store of registry lookups for the lifetime of an engine.

    ``None`` is a valid cached value meaning "no metadata", so use
    ``in`` (not ``get``) to tell a cached failure from a miss.

    Example:
        >>> cache = MetadataCache()
        >>> cache.set("left-pad", None)
        >>> "left-pad" in cache
        True
    """

    def __init__(self) -> None:
        self._entries: dict[str, RegistryMetadata | None] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> RegistryMetadata | None:
        """Return the cached entry for name, or None if absent or failed."""
        return self._entries.get(name)

    def set(self, name: str, metadata: RegistryMetadata | None) -> None:
        """Store the outcome of a lookup (last write wins)."""
        self._entries[name] = metadata

    def clear(self) -> None:
        """Drop every entry, including cached failures."""
        self._entries.clear()
