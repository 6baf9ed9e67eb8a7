"""XDG-compliant path management for depsight.

This module provides standardized paths following the XDG Base Directory
Specification for configuration storage, plus project-level paths.

XDG defaults:
- Config: ~/.config/depsight/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "depsight"

# Manifest file name inside a project directory
MANIFEST_FILENAME = "package.json"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/depsight/ (or XDG_CONFIG_HOME/depsight/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the settings file path.

    Returns:
        Path to ~/.config/depsight/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/depsight/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_manifest_path(project_dir: Path) -> Path:
    """Get the manifest path for a project directory.

    Args:
        project_dir: Root directory of the project.

    Returns:
        Path to <project_dir>/package.json.
    """
    return project_dir / MANIFEST_FILENAME


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to the configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    path = get_config_dir()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create config directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create config directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path
