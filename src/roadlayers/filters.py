"""Road feature filters and the combinator that composes them."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from .expressions import Predicate
from .render_constants import BASE_ROAD_CLASSES


if TYPE_CHECKING:
    from .expressions import Feature


__all__ = [
    "FeatureValidationError",
    "brunnel_filter",
    "class_filter",
    "combine_constraints",
    "filter_road",
    "validate_feature",
]

BRUNNEL_VALUES = ("bridge", "tunnel")


class FeatureValidationError(TypeError):
    """Raised when a feature's attributes have the wrong type."""


def validate_feature(feature: Feature) -> Feature:
    """Check the attributes the rule table dispatches on.

    A missing ``class`` is allowed and simply matches no road class, but a
    ``class`` that is present and not a string is a data source error.

    Raises:
        FeatureValidationError: If ``class`` is set to a non-string value.
    """
    road_class = feature.get("class")
    if road_class is not None and not isinstance(road_class, str):
        raise FeatureValidationError(
            f"Feature 'class' must be a string, got {type(road_class).__name__}: {road_class!r}"
        )
    return feature


def combine_constraints(
    constraint1: Predicate | None,
    constraint2: Predicate | None,
) -> Predicate | None:
    """AND two optional predicates together.

    Returns None when both are absent, the present one unchanged when only
    one is given, and otherwise an ``all`` predicate that checks
    ``constraint1`` first.
    """
    if constraint1 is None:
        return constraint2
    if constraint2 is None:
        return constraint1
    return Predicate(["all", constraint1.expression, constraint2.expression])


def class_filter(*road_classes: str) -> Predicate:
    """Predicate matching features whose class is one of ``road_classes``."""
    if len(road_classes) == 1:
        return Predicate(["==", ["get", "class"], road_classes[0]])
    return Predicate(["in", ["get", "class"], ["literal", list(road_classes)]])


def brunnel_filter(brunnel: str) -> Predicate:
    """Predicate for a brunnel mode.

    ``"surface"`` excludes bridges and tunnels; any other mode requires the
    feature's brunnel to equal it.
    """
    brunnel_value = ["coalesce", ["get", "brunnel"], ""]
    if brunnel == "surface":
        return Predicate(["!", ["in", brunnel_value, ["literal", list(BRUNNEL_VALUES)]]])
    return Predicate(["==", brunnel_value, brunnel])


def filter_road(constraint: Predicate | None, brunnel: str | None = None) -> Predicate:
    """Build the filter selecting road features for a layer.

    Args:
        constraint: Extra predicate ANDed with the road class allowlist.
        brunnel: Optional brunnel mode ("surface", "bridge", "tunnel").

    Returns:
        The combined predicate.
    """
    road_filter = combine_constraints(class_filter(*BASE_ROAD_CLASSES), constraint)
    if brunnel:
        road_filter = combine_constraints(road_filter, brunnel_filter(brunnel))
    # The class allowlist is always present
    return cast("Predicate", road_filter)
