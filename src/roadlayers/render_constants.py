"""Shared road layer constants."""

from __future__ import annotations


__all__ = [
    "BASE_ROAD_CLASSES",
    "CASING_WIDTH",
    "LINE_BLUR",
    "LINE_OPACITY",
    "MAX_ZOOM",
    "MIN_ZOOM_ALL_ROADS",
    "MUTED_SERVICE_TYPES",
    "ROAD_FILL_WIDTH",
    "TUNNEL_DASH_ARRAY",
    "TUNNEL_DASH_ZOOM",
]

# Zoom bounds
MIN_ZOOM_ALL_ROADS = 4
MAX_ZOOM = 20

# Classes drawn by every road layer; anything else is filtered out
BASE_ROAD_CLASSES = (
    "motorway",
    "trunk",
    "primary",
    "secondary",
    "tertiary",
    "busway",
    "bus_guideway",
    "minor",
    "service",
)

# Service subtypes drawn with the muted color ("" is an unset subtype)
MUTED_SERVICE_TYPES = ("parking_aisle", "driveway", "emergency_access", "")

# Line paint constants
LINE_OPACITY = 1
LINE_BLUR = 0.5
ROAD_FILL_WIDTH = 2
CASING_WIDTH = 4  # Drawn beneath the fill

# Tunnel casings are solid below this zoom and dashed at or above it
TUNNEL_DASH_ZOOM = 11
TUNNEL_DASH_ARRAY = [
    "step",
    ["zoom"],
    ["literal", [1]],
    TUNNEL_DASH_ZOOM,
    ["literal", [0.5, 0.25]],
]
