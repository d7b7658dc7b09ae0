"""Tests for the filters module."""

from __future__ import annotations

from typing import Any

import pytest

from roadlayers.expressions import ALWAYS, Predicate
from roadlayers.filters import (
    FeatureValidationError,
    brunnel_filter,
    class_filter,
    combine_constraints,
    filter_road,
    validate_feature,
)
from roadlayers.render_constants import BASE_ROAD_CLASSES


SAMPLE_FEATURES: list[dict[str, Any]] = [
    {"class": "motorway"},
    {"class": "motorway", "ramp": 1},
    {"class": "primary", "brunnel": "bridge"},
    {"class": "primary", "brunnel": "tunnel"},
    {"class": "minor", "toll": 1},
    {"class": "path"},
    {},
]


class TestCombineConstraints:
    """Tests for combine_constraints."""

    def test_both_absent_is_none(self) -> None:
        """Test that two absent constraints combine to None."""
        assert combine_constraints(None, None) is None

    def test_one_present_is_returned_unchanged(self) -> None:
        """Test that a single constraint is returned as the same object."""
        f = class_filter("motorway")
        g = class_filter("trunk")
        assert combine_constraints(f, None) is f
        assert combine_constraints(None, g) is g

    @pytest.mark.parametrize("feature", SAMPLE_FEATURES)
    def test_combined_is_conjunction(self, feature: dict[str, Any]) -> None:
        """Test that combining is a logical AND."""
        f = class_filter("motorway", "primary")
        g = brunnel_filter("surface")
        combined = combine_constraints(f, g)
        assert combined is not None
        assert combined(feature) == (f(feature) and g(feature))

    def test_combined_evaluates_left_first(self) -> None:
        """Test that the right side is skipped once the left side is false."""
        left = Predicate(False)
        broken = Predicate(["no-such-operator"])
        combined = combine_constraints(left, broken)
        assert combined is not None
        assert combined({}) is False


class TestFilterRoad:
    """Tests for filter_road."""

    @pytest.mark.parametrize("brunnel", [None, "surface", "bridge", "tunnel"])
    @pytest.mark.parametrize("road_class", ["path", "track", "rail", "tertiary_link", None])
    def test_classes_outside_allowlist_are_excluded(
        self, road_class: str | None, brunnel: str | None
    ) -> None:
        """Test that non-road classes never pass the filter."""
        road_filter = filter_road(ALWAYS, brunnel)
        for feature_brunnel in [None, "bridge", "tunnel"]:
            feature = {"class": road_class, "brunnel": feature_brunnel, "toll": 1, "ramp": 1}
            assert road_filter(feature) is False

    @pytest.mark.parametrize("road_class", BASE_ROAD_CLASSES)
    def test_allowlisted_classes_pass(self, road_class: str) -> None:
        """Test that every allowlisted class passes without a brunnel mode."""
        assert filter_road(None)({"class": road_class}) is True

    def test_surface_excludes_bridges_and_tunnels(self) -> None:
        """Test that the surface mode only keeps at-grade roads."""
        road_filter = filter_road(ALWAYS, "surface")
        assert road_filter({"class": "primary"}) is True
        assert road_filter({"class": "primary", "brunnel": "ford"}) is True
        assert road_filter({"class": "primary", "brunnel": "bridge"}) is False
        assert road_filter({"class": "primary", "brunnel": "tunnel"}) is False

    def test_tunnel_requires_exact_brunnel(self) -> None:
        """Test that the tunnel mode only keeps tunnels."""
        road_filter = filter_road(ALWAYS, "tunnel")
        assert road_filter({"class": "primary", "brunnel": "tunnel"}) is True
        assert road_filter({"class": "primary", "brunnel": "bridge"}) is False
        assert road_filter({"class": "primary"}) is False

    def test_extra_constraint_is_applied(self) -> None:
        """Test that the extra constraint narrows the allowlist."""
        road_filter = filter_road(class_filter("service"), "surface")
        assert road_filter({"class": "service"}) is True
        assert road_filter({"class": "minor"}) is False

    def test_filter_is_serializable(self) -> None:
        """Test that the filter is a plain expression list."""
        expression = filter_road(ALWAYS, "surface").to_json()
        assert expression[0] == "all"


class TestValidateFeature:
    """Tests for validate_feature."""

    def test_missing_class_is_allowed(self) -> None:
        """Test that a feature without class passes validation."""
        assert validate_feature({}) == {}

    def test_non_string_class_raises(self) -> None:
        """Test that a non-string class is rejected."""
        with pytest.raises(FeatureValidationError, match="must be a string"):
            validate_feature({"class": 5})

    def test_feature_validation_error_is_type_error(self) -> None:
        """Test FeatureValidationError is a TypeError subclass."""
        assert issubclass(FeatureValidationError, TypeError)
