"""Layer descriptor construction and per-feature evaluation."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from .expressions import Predicate, evaluate
from .filters import filter_road, validate_feature
from .render_constants import MAX_ZOOM, MIN_ZOOM_ALL_ROADS


if TYPE_CHECKING:
    from .expressions import Feature


__all__ = [
    "ROAD_LAYER_TEMPLATE",
    "base_road_layer",
    "feature_matches",
    "layer_clone",
    "resolve_paint",
]

ROAD_LAYER_TEMPLATE: dict[str, Any] = {
    "type": "line",
    "source": "openmaptiles",
    "source-layer": "transportation",
}


def layer_clone(template: dict[str, Any], layer_id: str) -> dict[str, Any]:
    """Deep-copy a layer template and give it an id."""
    layer = copy.deepcopy(template)
    layer["id"] = layer_id
    return layer


def base_road_layer(
    layer_id: str,
    constraint: Predicate | None,
    brunnel: str | None = None,
    minzoom: float = MIN_ZOOM_ALL_ROADS,
    maxzoom: float = MAX_ZOOM,
    template: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create a road layer descriptor.

    The zoom range is taken as given; callers keep ``minzoom <= maxzoom``.

    Args:
        layer_id: The layer id.
        constraint: Extra predicate on top of the road class allowlist.
        brunnel: Optional brunnel mode ("surface", "bridge", "tunnel").
        minzoom: Lowest zoom the layer is drawn at.
        maxzoom: Zoom above which the layer is hidden.
        template: Base template; None selects ``ROAD_LAYER_TEMPLATE``.

    Returns:
        A new descriptor with ``filter``, ``minzoom`` and ``maxzoom`` set.
    """
    layer = layer_clone(ROAD_LAYER_TEMPLATE if template is None else template, layer_id)
    layer["filter"] = filter_road(constraint, brunnel).to_json()
    layer["minzoom"] = minzoom
    layer["maxzoom"] = maxzoom
    return layer


def feature_matches(layer: dict[str, Any], feature: Feature, zoom: float | None = None) -> bool:
    """Check whether a layer draws a feature.

    A zoom outside the layer's zoom range never matches.
    """
    validate_feature(feature)
    if zoom is not None and not layer.get("minzoom", 0) <= zoom < layer.get("maxzoom", 24):
        return False
    return Predicate(layer.get("filter", True))(feature, zoom)


def resolve_paint(layer: dict[str, Any], feature: Feature, zoom: float) -> dict[str, Any]:
    """Evaluate every paint property of a layer for one feature at one zoom."""
    validate_feature(feature)
    return {key: evaluate(value, feature, zoom) for key, value in layer.get("paint", {}).items()}
