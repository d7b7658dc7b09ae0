"""Road color palettes and the class-to-color rule table."""

from __future__ import annotations

import colorsys
import json
import logging
import os
import re
from dataclasses import dataclass
from dataclasses import fields as dataclass_fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import matplotlib.colors as mcolors

from .expressions import evaluate
from .filters import validate_feature
from .render_constants import MUTED_SERVICE_TYPES


if TYPE_CHECKING:
    from .expressions import Expression, Feature


__all__ = [
    "CLASS_COLOR_RULES",
    "DEFAULT_PALETTE",
    "Palette",
    "PaletteValidationError",
    "REQUIRED_PALETTE_KEYS",
    "casing_color_expression",
    "color_expression",
    "color_for",
    "get_available_palettes",
    "get_package_dir",
    "get_palettes_dir",
    "load_palette",
    "load_palette_file",
    "normalize_color",
]

logger = logging.getLogger(__name__)

DEFAULT_PALETTE = "americana"


class PaletteValidationError(ValueError):
    """Raised when a palette file is missing keys or holds invalid colors."""

    pass


@dataclass(frozen=True)
class Palette:
    """Named road colors for one palette variant.

    ``casing`` is the fixed casing color, or None to draw casings with the
    same per-class color as the fill.
    """

    name: str
    motorway: str
    trunk: str
    primary: str
    secondary: str
    tertiary: str
    minor: str
    busway: str
    service: str
    service_muted: str
    toll: str
    fallback: str
    description: str = ""
    casing: str | None = None


# Keys that are palette metadata rather than colors
_META_KEYS = frozenset({"name", "description"})
_OPTIONAL_KEYS = frozenset({"description", "casing"})

ALLOWED_PALETTE_KEYS = frozenset(field.name for field in dataclass_fields(Palette))
REQUIRED_PALETTE_KEYS = ALLOWED_PALETTE_KEYS - _OPTIONAL_KEYS

# Road classes with a fixed palette color, as (classes, palette key)
CLASS_COLOR_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("motorway",), "motorway"),
    (("trunk",), "trunk"),
    (("primary",), "primary"),
    (("secondary",), "secondary"),
    (("tertiary", "tertiary_link"), "tertiary"),
    (("minor",), "minor"),
    (("busway", "bus_guideway"), "busway"),
)

_HSL_PATTERN = re.compile(
    r"^hsl\(\s*(-?\d+(?:\.\d+)?)\s*,\s*(\d+(?:\.\d+)?)%\s*,\s*(\d+(?:\.\d+)?)%\s*\)$"
)


def normalize_color(value: Any) -> str:
    """Normalize a palette color to a lowercase ``#rrggbb`` string.

    Accepts anything matplotlib understands as a color plus CSS
    ``hsl(h, s%, l%)`` strings.

    Raises:
        PaletteValidationError: If the value is not a recognizable color.
    """
    if not isinstance(value, str):
        raise PaletteValidationError(f"Color must be a string, got {value!r}.")
    match = _HSL_PATTERN.match(value.strip())
    if match:
        hue, saturation, lightness = (float(group) for group in match.groups())
        rgb = colorsys.hls_to_rgb((hue % 360) / 360, lightness / 100, saturation / 100)
        return mcolors.to_hex(rgb)
    if not mcolors.is_color_like(value):
        raise PaletteValidationError(f"Invalid color value: {value!r}.")
    return mcolors.to_hex(value)


def get_package_dir() -> Path:
    """Get the package installation directory."""
    return Path(__file__).parent


def get_palettes_dir() -> Path:
    """Get the palettes directory path.

    ``ROADLAYERS_PALETTE_DIR`` takes precedence, then the packaged palettes,
    then a ``palettes`` directory in the working directory.
    """
    override = os.environ.get("ROADLAYERS_PALETTE_DIR")
    if override:
        return Path(override)

    package_palettes = get_package_dir() / "data" / "palettes"
    if package_palettes.exists():
        return package_palettes

    cwd_palettes = Path.cwd() / "palettes"
    if cwd_palettes.exists():
        return cwd_palettes

    return package_palettes


def get_available_palettes() -> list[str]:
    """Return the names of the palette files in the palettes directory."""
    palettes_dir = get_palettes_dir()
    if not palettes_dir.exists():
        return []
    return sorted(f.stem for f in palettes_dir.glob("*.json"))


def _palette_from_dict(data: Any, source: str) -> Palette:
    if not isinstance(data, dict):
        raise PaletteValidationError(f"Palette '{source}' is not a JSON object.")

    unknown_keys = set(data) - ALLOWED_PALETTE_KEYS
    if unknown_keys:
        raise PaletteValidationError(f"Unknown palette keys in '{source}': {sorted(unknown_keys)}")
    missing_keys = REQUIRED_PALETTE_KEYS - data.keys()
    if missing_keys:
        raise PaletteValidationError(
            f"Palette '{source}' is missing required keys: {', '.join(sorted(missing_keys))}"
        )

    values = dict(data)
    for key, value in data.items():
        if key in _META_KEYS or (key == "casing" and value is None):
            continue
        try:
            values[key] = normalize_color(value)
        except PaletteValidationError as e:
            raise PaletteValidationError(f"Palette '{source}' key '{key}': {e}") from e
    return Palette(**values)


def load_palette_file(path: str | Path) -> Palette:
    """Load a palette from an explicit JSON file.

    Raises:
        PaletteValidationError: If the file content is not a valid palette.
        OSError: If the file cannot be read.
    """
    palette_file = Path(path)
    with palette_file.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise PaletteValidationError(f"Palette '{palette_file}' is not valid JSON: {e}") from e
    palette = _palette_from_dict(data, str(palette_file))
    logger.debug("Loaded palette %s from %s", palette.name, palette_file)
    return palette


def load_palette(palette_name: str = DEFAULT_PALETTE) -> Palette:
    """Load a palette by name from the palettes directory.

    Args:
        palette_name: The palette name (without .json extension).

    Returns:
        The validated palette, or the built-in default when no file exists.

    Raises:
        PaletteValidationError: If the palette file is invalid.
    """
    palette_file = get_palettes_dir() / f"{palette_name}.json"
    if not palette_file.exists():
        logger.warning("Palette file '%s' not found. Using default palette.", palette_file)
        return _get_default_palette()
    return load_palette_file(palette_file)


def _get_default_palette() -> Palette:
    """Return the built-in americana palette."""
    return _palette_from_dict(
        {
            "name": "Americana",
            "description": "Pale hue-coded roads with casings that reuse the fill color",
            "motorway": "hsl(0, 50%, 80%)",
            "trunk": "hsl(0, 50%, 70%)",
            "primary": "hsl(30, 60%, 78%)",
            "secondary": "hsl(50, 65%, 82%)",
            "tertiary": "hsl(72, 71%, 92%)",
            "minor": "#FFFFFF",
            "busway": "hsl(322, 60%, 70%)",
            "service": "#DECDAB",
            "service_muted": "#CCC",
            "toll": "hsl(48, 60%, 70%)",
            "fallback": "hsl(0, 0%, 0%)",
        },
        "default",
    )


def color_expression(palette: Palette) -> Expression:
    """Compile the class-to-color rule table into a ``match`` expression.

    Classes with a fixed color come first, then service roads split by
    subtype. Any other class gets the toll color when tolled and the
    fallback color otherwise.
    """
    branches: list[Any] = []
    for road_classes, key in CLASS_COLOR_RULES:
        label = road_classes[0] if len(road_classes) == 1 else list(road_classes)
        branches.extend([label, getattr(palette, key)])

    service_color = [
        "case",
        ["in", ["coalesce", ["get", "service"], ""], ["literal", list(MUTED_SERVICE_TYPES)]],
        palette.service_muted,
        palette.service,
    ]
    toll_color = [
        "case",
        ["to-boolean", ["coalesce", ["get", "toll"], 0]],
        palette.toll,
        palette.fallback,
    ]
    return ["match", ["get", "class"], *branches, "service", service_color, toll_color]


def casing_color_expression(palette: Palette) -> Expression:
    """Return the casing color: the fixed casing color or the fill expression."""
    if palette.casing is not None:
        return palette.casing
    return color_expression(palette)


def color_for(feature: Feature, palette: Palette | None = None) -> str:
    """Resolve the fill color of a single feature."""
    validate_feature(feature)
    if palette is None:
        palette = load_palette()
    return evaluate(color_expression(palette), feature)
