"""roadlayers - Generate vector-tile style layers for road features.

This package builds MapLibre style layer definitions (filter, paint and
layout) for roads, branching by road class, bridge/tunnel status and zoom.
"""

from importlib.metadata import PackageNotFoundError, version


try:
    __version__ = version("roadlayers")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = ["__version__"]
