"""Unit tests for the registry metadata service."""

import asyncio
import json
from collections.abc import Callable
from typing import Any
from unittest.mock import patch

import depsight.registry.metadata as metadata_module
import httpx
import pytest
from depsight.core.config import DepsightConfig
from depsight.models.package import RegistryMetadata
from depsight.registry.cache import MetadataCache
from depsight.registry.metadata import (
    MetadataService,
    RegistryError,
    find_fallback_entry,
    parse_registry_document,
)

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingRegistry:
    """httpx handler serving fixed documents and recording requests."""

    def __init__(self, documents: dict[str, Any] | None = None) -> None:
        self.documents = documents or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        name = request.url.path.lstrip("/")
        if name not in self.documents:
            return httpx.Response(404, json={"error": "Not found"})
        body = self.documents[name]
        if isinstance(body, bytes):
            return httpx.Response(200, content=body)
        return httpx.Response(200, json=body)

    @property
    def paths(self) -> list[str]:
        return [request.url.raw_path.decode() for request in self.requests]


def _service(handler: Handler, **kwargs: Any) -> MetadataService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MetadataService(client=client, registry_url="https://registry.test", **kwargs)


class TestParseRegistryDocument:
    """Tests for parse_registry_document function."""

    def test_latest_version_entry(self, react_registry_document: dict[str, Any]) -> None:
        """Fields come from the version tagged latest."""
        metadata = parse_registry_document(react_registry_document)

        assert metadata == RegistryMetadata(
            description="React is a JavaScript library",
            homepage="https://react.dev",
            latest_version="18.3.1",
        )

    def test_fallback_to_highest_qualifying_version(
        self, sparse_latest_document: dict[str, Any]
    ) -> None:
        """Missing fields come from the highest version that has either one."""
        metadata = parse_registry_document(sparse_latest_document)

        assert metadata.latest_version == "3.0.0"
        assert metadata.description == "Older description"
        assert metadata.homepage == "https://older.example"

    def test_highest_qualifying_version_supplies_both_fields(self) -> None:
        """Only the highest version with any field is consulted."""
        document = {
            "dist-tags": {"latest": "3.0.0"},
            "versions": {
                "1.0.0": {"description": "one", "homepage": "https://one.example"},
                "2.0.0": {"description": "two"},
                "3.0.0": {},
            },
        }

        metadata = parse_registry_document(document)

        assert metadata.description == "two"
        assert metadata.homepage is None

    def test_latest_field_kept_when_other_falls_back(self) -> None:
        """A field present on latest is kept while the missing one falls back."""
        document = {
            "dist-tags": {"latest": "2.0.0"},
            "versions": {
                "1.0.0": {"description": "one", "homepage": "https://one.example"},
                "2.0.0": {"description": "two"},
            },
        }

        metadata = parse_registry_document(document)

        assert metadata.description == "two"
        assert metadata.homepage is None

    def test_top_level_fallback(self) -> None:
        """Top-level fields are used when no version entry has them."""
        document = {
            "description": "top",
            "homepage": "https://top.example",
            "dist-tags": {"latest": "1.0.0"},
            "versions": {"1.0.0": {}},
        }

        metadata = parse_registry_document(document)

        assert metadata.description == "top"
        assert metadata.homepage == "https://top.example"

    def test_empty_strings_are_absent(self) -> None:
        """Empty strings do not count as values."""
        document = {
            "description": "",
            "dist-tags": {"latest": "1.0.0"},
            "versions": {"1.0.0": {"description": "", "homepage": ""}},
        }

        assert parse_registry_document(document) == RegistryMetadata(latest_version="1.0.0")

    def test_missing_dist_tags(self) -> None:
        """Documents without dist-tags have no latest version."""
        metadata = parse_registry_document({"description": "unpublished"})

        assert metadata.latest_version is None
        assert metadata.description == "unpublished"

    def test_latest_tag_without_entry(self) -> None:
        """A latest tag pointing nowhere still reports the version."""
        document = {
            "dist-tags": {"latest": "9.9.9"},
            "versions": {"1.0.0": {"description": "old"}},
        }

        metadata = parse_registry_document(document)

        assert metadata.latest_version == "9.9.9"
        assert metadata.description == "old"


class TestFindFallbackEntry:
    """Tests for find_fallback_entry function."""

    def test_uses_numeric_order(self) -> None:
        """2.10.0 is higher than 2.9.0."""
        versions = {
            "2.9.0": {"description": "nine"},
            "2.10.0": {"description": "ten"},
        }
        entry = find_fallback_entry(versions)

        assert entry is not None
        assert entry["description"] == "ten"

    def test_skips_entries_without_fields(self) -> None:
        """Versions with neither field are skipped."""
        versions = {"1.0.0": {"homepage": "https://h"}, "2.0.0": {}, "3.0.0": "broken"}
        assert find_fallback_entry(versions) == {"homepage": "https://h"}

    def test_none_when_nothing_qualifies(self) -> None:
        """No qualifying version yields None."""
        assert find_fallback_entry({"1.0.0": {}}) is None


class TestMetadataServiceUrls:
    """Tests for request construction."""

    def test_package_url_encodes_scoped_names(self) -> None:
        """'@' and '/' are percent-encoded as one path segment."""
        service = MetadataService(registry_url="https://registry.test/")

        assert service.package_url("@types/node") == "https://registry.test/%40types%2Fnode"
        assert service.package_url("react") == "https://registry.test/react"

    def test_from_config(self) -> None:
        """Settings are applied to the service."""
        config = DepsightConfig(registry_url="https://npm.example.com")

        service = MetadataService.from_config(config)

        assert service.package_url("x") == "https://npm.example.com/x"


class TestMetadataService:
    """Tests for MetadataService lookups."""

    @pytest.mark.asyncio
    async def test_fetches_and_caches(self, react_registry_document: dict[str, Any]) -> None:
        """The first lookup fetches; later lookups are served from cache."""
        registry = RecordingRegistry({"react": react_registry_document})
        service = _service(registry)

        first = await service.get_metadata("react")
        second = await service.get_metadata("react")

        assert first is not None
        assert first.latest_version == "18.3.1"
        assert second == first
        assert len(registry.requests) == 1
        assert "react" in service.cache

    @pytest.mark.asyncio
    async def test_request_headers(self, react_registry_document: dict[str, Any]) -> None:
        """Requests ask for JSON and identify the client."""
        registry = RecordingRegistry({"react": react_registry_document})
        service = _service(registry, user_agent="depsight-test/1.0")

        await service.get_metadata("react")

        request = registry.requests[0]
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"] == "depsight-test/1.0"

    @pytest.mark.asyncio
    async def test_scoped_name_request_path(self) -> None:
        """Scoped packages are requested with an encoded path."""
        registry = RecordingRegistry()
        service = _service(registry)

        await service.get_metadata("@types/node")

        assert registry.paths == ["/%40types%2Fnode"]

    @pytest.mark.asyncio
    async def test_not_found_is_cached_as_none(self) -> None:
        """A 404 yields None and is not retried."""
        registry = RecordingRegistry()
        service = _service(registry)

        assert await service.get_metadata("missing") is None
        assert await service.get_metadata("missing") is None
        assert len(registry.requests) == 1
        assert "missing" in service.cache

    @pytest.mark.asyncio
    async def test_malformed_body_is_none(self) -> None:
        """A body that is not JSON yields None."""
        registry = RecordingRegistry({"broken": b"<html>oops</html>"})
        service = _service(registry)

        assert await service.get_metadata("broken") is None

    @pytest.mark.asyncio
    async def test_non_object_body_is_none(self) -> None:
        """A JSON body that is not an object yields None."""
        registry = RecordingRegistry({"listy": b"[1, 2, 3]"})
        service = _service(registry)

        assert await service.get_metadata("listy") is None

    @pytest.mark.asyncio
    async def test_very_long_version_segments(self) -> None:
        """Version keys with thousands of digits are ordered, not rejected."""
        huge = "1." + "9" * 5000
        registry = RecordingRegistry(
            {
                "giant": {
                    "dist-tags": {"latest": "1.0.0"},
                    "versions": {"1.0.0": {}, huge: {"description": "huge"}},
                }
            }
        )
        service = _service(registry)

        metadata = await service.get_metadata("giant")

        assert metadata is not None
        assert metadata.description == "huge"

    @pytest.mark.asyncio
    async def test_unparseable_document_is_cached_as_none(self) -> None:
        """A document that fails to parse yields None and is not refetched."""
        registry = RecordingRegistry({"odd": {"dist-tags": {"latest": "1.0.0"}}})
        service = _service(registry)

        with patch.object(
            metadata_module, "parse_registry_document", side_effect=ValueError("bad version")
        ):
            assert await service.get_metadata("odd") is None
            assert await service.get_metadata("odd") is None

        assert len(registry.requests) == 1
        assert "odd" in service.cache

    @pytest.mark.asyncio
    async def test_transport_error_is_none(self) -> None:
        """Network failures yield None and are cached."""
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(str(request.url))
            raise httpx.ConnectError("connection refused", request=request)

        service = _service(handler)

        assert await service.get_metadata("react") is None
        assert await service.get_metadata("react") is None
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_fetch_raises_on_status(self) -> None:
        """fetch() reports HTTP failures as RegistryError."""
        service = _service(RecordingRegistry())

        with pytest.raises(RegistryError, match="404"):
            await service.fetch("missing")

    @pytest.mark.asyncio
    async def test_concurrent_lookups_share_one_fetch(
        self, react_registry_document: dict[str, Any]
    ) -> None:
        """Simultaneous requests for one name issue a single fetch."""
        calls: list[str] = []
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            await release.wait()
            return httpx.Response(200, content=json.dumps(react_registry_document).encode())

        service = _service(handler)  # type: ignore[arg-type]

        lookups = asyncio.gather(*(service.get_metadata("react") for _ in range(5)))
        await asyncio.sleep(0)
        release.set()
        results = await lookups

        assert len(calls) == 1
        assert all(r == results[0] for r in results)
        assert results[0] is not None

    @pytest.mark.asyncio
    async def test_separate_services_have_separate_caches(
        self, react_registry_document: dict[str, Any]
    ) -> None:
        """Each service fetches independently."""
        registry = RecordingRegistry({"react": react_registry_document})

        await _service(registry).get_metadata("react")
        await _service(registry).get_metadata("react")

        assert len(registry.requests) == 2

    @pytest.mark.asyncio
    async def test_prefilled_cache_skips_fetch(self) -> None:
        """Entries already in the cache are returned without a request."""
        registry = RecordingRegistry()
        cache = MetadataCache()
        cache.set("react", RegistryMetadata(latest_version="1.0.0"))
        service = _service(registry, cache=cache)

        metadata = await service.get_metadata("react")

        assert metadata == RegistryMetadata(latest_version="1.0.0")
        assert registry.requests == []

    @pytest.mark.asyncio
    async def test_aclose_clears_cache(self, react_registry_document: dict[str, Any]) -> None:
        """Closing the service drops cached entries."""
        registry = RecordingRegistry({"react": react_registry_document})

        async with _service(registry) as service:
            await service.get_metadata("react")
            assert len(service.cache) == 1

        assert len(service.cache) == 0


class TestMetadataCache:
    """Tests for MetadataCache."""

    def test_cached_failure_is_distinguishable(self) -> None:
        """A cached None is 'in' the cache, unlike a miss."""
        cache = MetadataCache()
        cache.set("left-pad", None)

        assert "left-pad" in cache
        assert "react" not in cache
        assert cache.get("left-pad") is None
