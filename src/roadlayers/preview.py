"""Legend previews of road layers rendered with matplotlib."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import matplotlib.pyplot as plt
import numpy as np

from .layers import feature_matches, resolve_paint
from .palettes import load_palette
from .stylesheet import build_road_layers


if TYPE_CHECKING:
    from pathlib import Path

    from matplotlib.axes import Axes

    from .palettes import Palette

__all__ = ["PREVIEW_FEATURES", "render_preview"]

logger = logging.getLogger(__name__)

# One legend row per sample feature, top to bottom
PREVIEW_FEATURES: list[tuple[str, dict[str, Any]]] = [
    ("motorway", {"class": "motorway"}),
    ("trunk", {"class": "trunk"}),
    ("primary", {"class": "primary"}),
    ("secondary", {"class": "secondary"}),
    ("tertiary", {"class": "tertiary"}),
    ("minor", {"class": "minor"}),
    ("busway", {"class": "busway"}),
    ("service", {"class": "service", "service": "alley"}),
    ("service (driveway)", {"class": "service", "service": "driveway"}),
    ("primary tunnel", {"class": "primary", "brunnel": "tunnel"}),
    ("secondary bridge", {"class": "secondary", "brunnel": "bridge"}),
]

# Matplotlib points per style pixel of line width
LINE_WIDTH_SCALE = 2.0
LINE_START_X = 0.35
LINE_END_X = 0.95


def _draw_row(
    ax: Axes,
    row: float,
    layers: list[dict[str, Any]],
    feature: dict[str, Any],
    zoom: float,
) -> int:
    """Draw every layer that matches a feature; return how many were drawn."""
    xs = np.linspace(LINE_START_X, LINE_END_X, 2)
    ys = np.full_like(xs, row)
    drawn = 0
    for layer in layers:
        if not feature_matches(layer, feature, zoom):
            continue
        paint = resolve_paint(layer, feature, zoom)
        line_kwargs: dict[str, Any] = {
            "color": paint["line-color"],
            "alpha": paint.get("line-opacity", 1),
            "linewidth": paint.get("line-width", 1) * LINE_WIDTH_SCALE,
            "solid_capstyle": "round",
            "dash_capstyle": "round",
        }
        # Dash lengths are in line widths; matplotlib scales them the same way
        dasharray = paint.get("line-dasharray")
        if dasharray and len(dasharray) >= 2:
            line_kwargs["dashes"] = tuple(dasharray)
        ax.plot(xs, ys, **line_kwargs)
        drawn += 1
    return drawn


def render_preview(
    output_file: Path,
    palette: Palette | None = None,
    zoom: float = 12.0,
    dpi: int = 150,
    restrict_to_class: bool = False,
) -> Path:
    """Render a legend of sample road features as they appear at a zoom level.

    Args:
        output_file: Image path; the format follows the file extension.
        palette: Palette to draw with, the default palette when None.
        zoom: Zoom level used for filters and zoom-dependent paint.
        dpi: Output resolution.
        restrict_to_class: Build layers restricted to each variant's class.

    Returns:
        The path written to.
    """
    if palette is None:
        palette = load_palette()
    layers = build_road_layers(palette, restrict_to_class)

    rows = len(PREVIEW_FEATURES)
    fig, ax = plt.subplots(figsize=(6, 0.45 * rows + 0.8), facecolor="#FFFFFF")
    try:
        ax.set_xlim(0, 1)
        ax.set_ylim(-0.5, rows - 0.5)
        ax.invert_yaxis()
        ax.axis("off")
        ax.set_title(f"{palette.name} roads at z{zoom:g}", fontsize=10)

        for row, (label, feature) in enumerate(PREVIEW_FEATURES):
            drawn = _draw_row(ax, row, layers, feature, zoom)
            ax.text(
                0.02,
                row,
                label,
                va="center",
                fontsize=8,
                color="#000000" if drawn else "#999999",
            )
            if not drawn:
                logger.debug("No layer draws %s at zoom %s", label, zoom)

        output_file.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_file, dpi=dpi, facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)

    logger.info("Preview saved as %s", output_file)
    return output_file
