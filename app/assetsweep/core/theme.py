"""Console colors for assetsweep.

The bundled ``data/theme.toml`` defines every color; a user file at
``~/.config/assetsweep/theme.toml`` may override any subset of the
``[colors]`` table.
"""

import logging
import re
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, field_validator
from rich.theme import Theme

from assetsweep.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")

# Style name -> (color field, prefix)
_STYLE_MAP: dict[str, tuple[str, str]] = {
    "text": ("text", ""),
    "muted": ("muted", ""),
    "dim": ("muted", ""),
    "header": ("header", ""),
    "bold_header": ("header", "bold "),
    "border": ("border", ""),
    "success": ("success", ""),
    "warning": ("warning", ""),
    "error": ("error", "bold "),
    "info": ("info", ""),
    "root": ("root", ""),
    "circular": ("circular", "bold "),
    "leaf": ("leaf", ""),
    "internal": ("internal", ""),
    "excluded": ("excluded", ""),
    "linked": ("linked", ""),
}


class ThemeColors(BaseModel):
    """Palette used by tables, panels and graph summaries.

    Values are ``#RGB`` or ``#RRGGBB`` strings.
    """

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Node kinds
    root: str = "#c1ff62"
    circular: str = "#d44ebc"
    leaf: str = "#0e8ac8"
    internal: str = "#b2bec3"

    # Exclusion state
    excluded: str = "#faf870"
    linked: str = "#f5b332"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex(cls, v: object, info: Any) -> str:
        if not isinstance(v, str) or not _HEX_COLOR.fullmatch(v.strip()):
            msg = f"{info.field_name}: expected #RGB or #RRGGBB, got {v!r}"
            raise ValueError(msg)
        return v.strip()


def get_bundled_theme_path() -> Path:
    """Location of the theme shipped with the package."""
    return resources.files("assetsweep.data").joinpath("theme.toml")  # type: ignore[return-value]


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Returns None when the file is missing or unreadable. Non-string
    entries are dropped so validation only sees candidate colors.
    """
    if not path.is_file():
        return None
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    table: object = data.get("colors", {})
    if not isinstance(table, dict):
        logger.warning("Theme file %s has no usable [colors] table", path)
        return None
    return {k: v for k, v in cast(dict[str, object], table).items() if isinstance(v, str)}


def load_theme() -> ThemeColors:
    """Merge the user's overrides onto the bundled palette.

    An invalid merged palette is discarded in favor of the model defaults.
    """
    colors = _load_toml_colors(Path(get_bundled_theme_path())) or {}
    if not colors:
        logger.error("Bundled theme is missing or empty")

    user_path = get_user_theme_path()
    overrides = _load_toml_colors(user_path)
    if overrides:
        logger.debug("Applying theme overrides from %s", user_path)
        colors = {**colors, **overrides}

    try:
        return ThemeColors(**colors)
    except ValueError as e:
        logger.warning("Invalid theme, falling back to defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme for ``colors`` (loaded from disk when omitted)."""
    palette = colors or load_theme()
    return Theme(
        {style: prefix + getattr(palette, field) for style, (field, prefix) in _STYLE_MAP.items()}
    )


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
