"""Stylesheet configuration and output path management."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .palettes import DEFAULT_PALETTE, Palette, load_palette


__all__ = [
    "DEFAULT_SOURCE_URL",
    "StylesheetConfig",
    "generate_output_filename",
    "get_styles_dir",
]

DEFAULT_SOURCE_URL = "https://tiles.openfreemap.org/planet"


def get_styles_dir() -> Path:
    """Get the stylesheet output directory, creating it if necessary."""
    styles_dir = Path.cwd() / "styles"
    styles_dir.mkdir(parents=True, exist_ok=True)
    return styles_dir


def generate_output_filename(palette_name: str) -> Path:
    """Generate a unique stylesheet filename with palette name and datetime.

    Args:
        palette_name: The palette name.

    Returns:
        The full path to the output file.
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    palette_slug = palette_name.lower().replace(" ", "_")
    return get_styles_dir() / f"{palette_slug}_roads_{timestamp}.json"


@dataclass
class StylesheetConfig:
    """Configuration for stylesheet generation."""

    palette_name: str = DEFAULT_PALETTE
    source_url: str = DEFAULT_SOURCE_URL
    restrict_to_class: bool = False
    palette: Palette | None = None

    def __post_init__(self) -> None:
        """Load palette data after initialization."""
        if self.palette is None:
            self.palette = load_palette(self.palette_name)

    def get_output_path(self) -> Path:
        """Generate the output file path."""
        return generate_output_filename(self.palette_name)
