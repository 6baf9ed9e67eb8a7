"""depsight settings.

This module provides the configuration model and I/O functions for
registry access, source scanning, and the package manager used by
update/remove.

Configuration is stored in ~/.config/depsight/config.toml
"""

import os
import tomllib
from pathlib import Path
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from depsight import __version__
from depsight.core.paths import get_config_path

# Package manager type alias
PackageManager = Literal["npm", "pnpm", "yarn"]

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_USER_AGENT = f"depsight/{__version__}"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_CONCURRENCY = 8
DEFAULT_SOURCE_EXTENSIONS: tuple[str, ...] = ("js", "jsx", "ts", "tsx", "mjs", "cjs")
DEFAULT_EXCLUDED_DIRS: tuple[str, ...] = ("node_modules",)

# Environment variable overriding the registry URL
REGISTRY_URL_ENV = "DEPSIGHT_REGISTRY_URL"


class ConfigError(Exception):
    """Raised when the configuration cannot be loaded or saved."""


class DepsightConfig(BaseModel):
    """Configuration for depsight.

    Attributes:
        registry_url: Base URL of the npm-compatible registry.
        user_agent: User-Agent header sent with registry requests.
        timeout_seconds: Timeout for a single registry request.
        concurrency: Maximum number of registry requests in flight.
        source_extensions: File extensions scanned for imports.
        excluded_dirs: Directory names skipped while scanning.
        package_manager: Tool used to install and uninstall packages.
    """

    model_config = ConfigDict(extra="forbid")

    registry_url: Annotated[
        str,
        Field(description="Registry base URL"),
    ] = DEFAULT_REGISTRY_URL
    user_agent: Annotated[
        str,
        Field(min_length=1, description="User-Agent for registry requests"),
    ] = DEFAULT_USER_AGENT
    timeout_seconds: Annotated[
        float,
        Field(ge=1, le=120, description="Registry request timeout in seconds (1-120)"),
    ] = DEFAULT_TIMEOUT_SECONDS
    concurrency: Annotated[
        int,
        Field(ge=1, le=64, description="Maximum concurrent registry requests (1-64)"),
    ] = DEFAULT_CONCURRENCY
    source_extensions: Annotated[
        tuple[str, ...],
        Field(description="Source file extensions to scan"),
    ] = DEFAULT_SOURCE_EXTENSIONS
    excluded_dirs: Annotated[
        tuple[str, ...],
        Field(description="Directory names excluded from scanning"),
    ] = DEFAULT_EXCLUDED_DIRS
    package_manager: Annotated[
        PackageManager,
        Field(description="Package manager used for update/remove"),
    ] = "npm"

    @field_validator("registry_url")
    @classmethod
    def validate_registry_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        url = v.strip().rstrip("/")
        if not url.startswith(("http://", "https://")):
            msg = f"registry_url must be an http(s) URL, got '{v}'"
            raise ValueError(msg)
        return url

    @field_validator("source_extensions")
    @classmethod
    def validate_extensions(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Strip leading dots and reject an empty extension list."""
        extensions = tuple(ext.strip().lstrip(".") for ext in v if ext.strip().lstrip("."))
        if not extensions:
            msg = "source_extensions must contain at least one extension"
            raise ValueError(msg)
        return extensions


def load_config(path: Path | None = None) -> DepsightConfig:
    """Load configuration from a TOML file.

    A missing file yields the default configuration. The registry URL
    can be overridden with the DEPSIGHT_REGISTRY_URL environment variable.

    Args:
        path: Path to the config file. If None, uses default config path.

    Returns:
        Validated DepsightConfig object.

    Raises:
        ConfigError: If the file cannot be read, parsed, or validated.
    """
    config_path = path or get_config_path()

    data: dict[str, object] = {}
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML syntax in {config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read config: {e}") from e

    env_registry = os.environ.get(REGISTRY_URL_ENV)
    if env_registry:
        data["registry_url"] = env_registry

    try:
        return DepsightConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: DepsightConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The DepsightConfig object to save.
        path: Path to save the config. If None, uses default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    from tempfile import NamedTemporaryFile

    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: DepsightConfig, *, include_defaults: bool = False) -> dict[str, object]:
    """Convert DepsightConfig to a dictionary for TOML serialization.

    Only non-default values are included unless requested, to keep
    the file clean.

    Args:
        config: The DepsightConfig to convert.
        include_defaults: If True, include every field.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return config.model_dump(mode="json", exclude_defaults=not include_defaults)
