"""Assembly of road layers into a complete style document."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, cast

from .layers import ROAD_LAYER_TEMPLATE
from .roads import ROAD_STYLES, RoadStyle


if TYPE_CHECKING:
    from pathlib import Path

    from .config import StylesheetConfig
    from .palettes import Palette

__all__ = [
    "build_road_layers",
    "build_stylesheet",
    "get_layer_groups",
    "write_stylesheet",
]

logger = logging.getLogger(__name__)

STYLE_SPEC_VERSION = 8


def get_layer_groups(restrict_to_class: bool = False) -> list[list[RoadStyle]]:
    """Return road style variants grouped from the bottom of the map up.

    Tunnels are drawn first and bridges last. The surface group is the single
    base road variant, or every class variant when layers are restricted to
    their own class.
    """
    if restrict_to_class:
        surface = [style for style in ROAD_STYLES.values() if style.filter is not None]
    else:
        surface = [ROAD_STYLES["road"]]
    return [[ROAD_STYLES["tunnel"]], surface, [ROAD_STYLES["bridge"]]]


def build_road_layers(palette: Palette, restrict_to_class: bool = False) -> list[dict[str, Any]]:
    """Build every road layer in draw order.

    Within each group all casings come before all fills, so a casing never
    covers a neighbouring road's fill.
    """
    layers: list[dict[str, Any]] = []
    for group in get_layer_groups(restrict_to_class):
        for style in group:
            layer = style.casing(palette, restrict_to_class=restrict_to_class)
            layer["id"] = f"road_{style.name}_casing"
            layers.append(layer)
        for style in group:
            layer = style.fill(palette, restrict_to_class=restrict_to_class)
            layer["id"] = f"road_{style.name}_fill"
            layers.append(layer)

    logger.debug("Built %d road layers with palette %s", len(layers), palette.name)
    return layers


def build_stylesheet(config: StylesheetConfig) -> dict[str, Any]:
    """Build a style document holding the road layers and their tile source."""
    palette = cast("Palette", config.palette)
    return {
        "version": STYLE_SPEC_VERSION,
        "name": f"{palette.name} roads",
        "sources": {
            ROAD_LAYER_TEMPLATE["source"]: {
                "type": "vector",
                "url": config.source_url,
            },
        },
        "layers": build_road_layers(palette, config.restrict_to_class),
    }


def write_stylesheet(style: dict[str, Any], output_file: Path, indent: int | None = 2) -> Path:
    """Write a style document as JSON.

    Args:
        style: The style document.
        output_file: Destination path; parent directories are created.
        indent: JSON indentation, or None for compact output.

    Returns:
        The path written to.
    """
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with output_file.open("w", encoding="utf-8") as f:
        json.dump(style, f, indent=indent)
        f.write("\n")
    logger.info("Stylesheet with %d layers saved as %s", len(style.get("layers", [])), output_file)
    return output_file
