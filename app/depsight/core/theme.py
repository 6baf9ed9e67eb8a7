"""Color theme for depsight output.

The bundled ``data/theme.toml`` defines every color; a user file at
``~/.config/depsight/theme.toml`` may override any subset of them.
"""

import logging
import re
import tomllib
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from rich.theme import Theme

from depsight.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


def _check_hex(value: str) -> str:
    color = value.strip()
    if not _HEX_COLOR.fullmatch(color):
        msg = f"expected a #RGB or #RRGGBB color, got '{value}'"
        raise ValueError(msg)
    if len(color) == 4:
        # Rich only parses the six-digit form
        color = "#" + "".join(c * 2 for c in color[1:])
    return color


HexColor = Annotated[str, AfterValidator(_check_hex)]


class ThemeColors(BaseModel):
    """Colors used by tables and messages."""

    model_config = ConfigDict(extra="forbid")

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    outdated: HexColor = "#0e8ac8"
    unused: HexColor = "#d44ebc"
    latest: HexColor = "#c1ff62"

    package_runtime: HexColor = "#69B9A1"
    package_dev: HexColor = "#226666"


# Rich style name -> template filled from ThemeColors fields
STYLE_TEMPLATES: dict[str, str] = {
    "text": "{text}",
    "muted": "{muted}",
    "dim": "{muted}",
    "header": "{header}",
    "bold_header": "bold {header}",
    "border": "{border}",
    "success": "{success}",
    "warning": "{warning}",
    "error": "bold {error}",
    "info": "{info}",
    "outdated": "bold {outdated}",
    "unused": "{unused}",
    "latest": "{latest}",
    "package_runtime": "bold {package_runtime}",
    "package_dev": "{package_dev}",
}


def get_bundled_theme_path() -> Path:
    """Return the path of the theme shipped with the package."""
    return Path(str(resources.files("depsight.data").joinpath("theme.toml")))


def read_color_table(path: Path) -> dict[str, object] | None:
    """Read the ``[colors]`` table of a theme file.

    Args:
        path: Theme file to read.

    Returns:
        The raw color table, or None if the file is missing or unusable.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: 'colors' is not a table", path)
        return None
    return colors


def load_theme() -> ThemeColors:
    """Load the bundled theme with user overrides applied.

    Invalid overrides are discarded as a whole and the bundled colors
    are used.
    """
    bundled = read_color_table(get_bundled_theme_path())
    if bundled is None:
        logger.error("Bundled theme is missing or unreadable, using built-in colors")
        bundled = {}

    user_path = get_user_theme_path()
    overrides = read_color_table(user_path) or {}
    if overrides:
        logger.debug("Applying %d color overrides from %s", len(overrides), user_path)

    try:
        return ThemeColors.model_validate({**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Invalid theme colors in %s, using defaults: %s", user_path, e)
        return ThemeColors.model_validate(bundled)


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme for a set of colors.

    Args:
        colors: Colors to use. Loaded from the theme files if None.
    """
    values = (colors or load_theme()).model_dump()
    return Theme({name: template.format(**values) for name, template in STYLE_TEMPLATES.items()})


@lru_cache(maxsize=1)
def get_theme() -> Theme:
    """Return the Rich theme, loading it on first use."""
    return get_rich_theme()


def reload_theme() -> Theme:
    """Discard the cached theme and load it again from disk."""
    get_theme.cache_clear()
    return get_theme()
