"""Fixtures shared by CLI command tests."""

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from depsight.models.package import RegistryMetadata
from depsight.registry.metadata import MetadataService, RegistryError

REGISTRY: dict[str, RegistryMetadata] = {
    "react": RegistryMetadata(
        description="React is a JavaScript library",
        homepage="https://react.dev",
        latest_version="18.3.1",
    ),
    "lodash": RegistryMetadata(description="Lodash modular utilities", latest_version="4.17.21"),
    "typescript": RegistryMetadata(latest_version="5.4.0"),
    "@types/node": RegistryMetadata(latest_version="20.11.0"),
}


async def _fake_fetch(name: str) -> RegistryMetadata:
    if name in REGISTRY:
        return REGISTRY[name]
    raise RegistryError("Failed to fetch metadata (404)")


@pytest.fixture
def registry() -> Iterator[AsyncMock]:
    """Serve registry lookups from REGISTRY instead of the network."""
    fetch = AsyncMock(side_effect=_fake_fetch)
    with patch.object(MetadataService, "fetch", new=fetch):
        yield fetch


@pytest.fixture
def project(
    write_project: Callable[..., Path],
    sample_manifest_data: dict[str, Any],
) -> Path:
    """Sample project whose source imports react and lodash."""
    return write_project(
        sample_manifest_data,
        {
            "src/index.ts": "import React from 'react';\nimport _ from 'lodash';\n",
            "node_modules/left-pad/index.js": "module.exports = require('left-pad');\n",
        },
    )
