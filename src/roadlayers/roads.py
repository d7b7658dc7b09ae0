"""Road style variants and their fill and casing layers."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

from .expressions import ALWAYS, Predicate
from .filters import class_filter, combine_constraints
from .layers import base_road_layer
from .palettes import Palette, casing_color_expression, color_expression, load_palette
from .render_constants import (
    CASING_WIDTH,
    LINE_BLUR,
    LINE_OPACITY,
    MIN_ZOOM_ALL_ROADS,
    ROAD_FILL_WIDTH,
    TUNNEL_DASH_ARRAY,
)


__all__ = [
    "ROAD_STYLES",
    "RoadStyle",
    "get_available_road_styles",
    "get_road_style",
]


@dataclass(frozen=True)
class RoadStyle:
    """Configuration for one road variant.

    Variants differ only in data: the brunnel mode their layers select and an
    optional predicate naming the road class they stand for. ``fill()`` and
    ``casing()`` ignore that predicate unless ``restrict_to_class`` is set.
    """

    name: str
    brunnel: str = "surface"
    min_zoom_fill: float = MIN_ZOOM_ALL_ROADS
    min_zoom_casing: float = MIN_ZOOM_ALL_ROADS
    sort_key: int = 0
    filter: Predicate | None = None

    def _constraint(self, restrict_to_class: bool) -> Predicate:
        if restrict_to_class and self.filter is not None:
            return self.filter
        return ALWAYS

    def _layout(self) -> dict[str, Any]:
        return {
            "line-cap": "round",
            "line-join": "round",
            "visibility": "visible",
            "line-sort-key": self.sort_key,
        }

    def fill(
        self, palette: Palette | None = None, *, restrict_to_class: bool = False
    ) -> dict[str, Any]:
        """Build the fill layer, the colored stroke of the road surface."""
        if palette is None:
            palette = load_palette()
        layer = base_road_layer(
            "fill", self._constraint(restrict_to_class), self.brunnel, self.min_zoom_fill
        )
        layer["layout"] = self._layout()
        layer["paint"] = {
            "line-opacity": LINE_OPACITY,
            "line-color": color_expression(palette),
            "line-width": ROAD_FILL_WIDTH,
            "line-blur": LINE_BLUR,
        }
        return layer

    def casing(
        self, palette: Palette | None = None, *, restrict_to_class: bool = False
    ) -> dict[str, Any]:
        """Build the casing layer, the wider outline drawn beneath the fill.

        Tunnel casings are dashed from zoom 11 up.
        """
        if palette is None:
            palette = load_palette()
        layer = base_road_layer(
            "casing", self._constraint(restrict_to_class), self.brunnel, self.min_zoom_casing
        )
        layer["layout"] = self._layout()
        layer["paint"] = {
            "line-opacity": LINE_OPACITY,
            "line-color": casing_color_expression(palette),
            "line-width": CASING_WIDTH,
            "line-blur": LINE_BLUR,
        }
        if self.brunnel == "tunnel":
            layer["paint"]["line-dasharray"] = copy.deepcopy(TUNNEL_DASH_ARRAY)
        return layer


_RAMP = Predicate(["to-boolean", ["coalesce", ["get", "ramp"], 0]])
_NOT_RAMP = Predicate(["!", _RAMP.expression])

ROAD_STYLES: dict[str, RoadStyle] = {
    "road": RoadStyle("road"),
    "motorway": RoadStyle(
        "motorway",
        filter=combine_constraints(class_filter("motorway"), _NOT_RAMP),
    ),
    "motorway_link": RoadStyle(
        "motorway_link",
        filter=combine_constraints(class_filter("motorway"), _RAMP),
    ),
    "trunk": RoadStyle("trunk", filter=class_filter("trunk")),
    "primary": RoadStyle("primary", filter=class_filter("primary")),
    "secondary": RoadStyle("secondary", filter=class_filter("secondary")),
    "tertiary": RoadStyle("tertiary", filter=class_filter("tertiary")),
    "minor": RoadStyle("minor", filter=class_filter("minor")),
    "service": RoadStyle("service", filter=class_filter("service")),
    "busway": RoadStyle("busway", filter=class_filter("busway", "bus_guideway")),
    "tunnel": RoadStyle("tunnel", brunnel="tunnel"),
    "bridge": RoadStyle("bridge", brunnel="bridge"),
}


def get_available_road_styles() -> list[str]:
    """Return the road style variant names."""
    return list(ROAD_STYLES)


def get_road_style(name: str) -> RoadStyle:
    """Return the road style variant with the given name."""
    if name not in ROAD_STYLES:
        raise KeyError(f"Unknown road style '{name}'.")
    return ROAD_STYLES[name]
