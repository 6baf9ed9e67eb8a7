"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture(autouse=True)
def isolated_config_home(
    tmp_path_factory: pytest.TempPathFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory for every test."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("DEPSIGHT_REGISTRY_URL", raising=False)
    return config_home


@pytest.fixture
def sample_manifest_data() -> dict[str, Any]:
    """package.json content with both dependency groups."""
    return {
        "name": "sample-app",
        "version": "1.0.0",
        "private": True,
        "scripts": {"build": "tsc"},
        "dependencies": {
            "react": "^18.2.0",
            "lodash": "~4.17.20",
            "left-pad": "1.3.0",
        },
        "devDependencies": {
            "typescript": "^5.4.0",
            "@types/node": "^20.11.0",
        },
    }


@pytest.fixture
def write_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory that writes a project directory with package.json and sources.

    Usage:
        project = write_project({"dependencies": {...}}, {"src/index.ts": "..."})
    """

    def _write(
        manifest: dict[str, Any] | None,
        sources: dict[str, str] | None = None,
        root: Path | None = None,
    ) -> Path:
        project = root or tmp_path / "project"
        project.mkdir(exist_ok=True)
        if manifest is not None:
            (project / "package.json").write_text(json.dumps(manifest, indent=2) + "\n")
        for relative, content in (sources or {}).items():
            file_path = project / relative
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content)
        return project

    return _write


@pytest.fixture
def react_registry_document() -> dict[str, Any]:
    """Registry document whose latest version carries full metadata."""
    return {
        "name": "react",
        "description": "React top-level description",
        "homepage": "https://react.dev/top",
        "dist-tags": {"latest": "18.3.1", "next": "19.0.0-rc.1"},
        "versions": {
            "18.2.0": {"description": "React 18.2", "homepage": "https://react.dev/18.2"},
            "18.3.1": {
                "description": "React is a JavaScript library",
                "homepage": "https://react.dev",
            },
        },
    }


@pytest.fixture
def sparse_latest_document() -> dict[str, Any]:
    """Registry document whose latest version has no description or homepage."""
    return {
        "name": "sparse",
        "dist-tags": {"latest": "3.0.0"},
        "versions": {
            "1.0.0": {"description": "Oldest description", "homepage": "https://old.example"},
            "2.10.0": {"description": "Older description", "homepage": "https://older.example"},
            "2.9.0": {"description": "Not the highest", "homepage": "https://wrong.example"},
            "3.0.0": {},
        },
    }
