"""Tests for stylesheet assembly."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from roadlayers.config import StylesheetConfig
from roadlayers.layers import feature_matches
from roadlayers.palettes import Palette, load_palette
from roadlayers.render_constants import BASE_ROAD_CLASSES
from roadlayers.stylesheet import (
    build_road_layers,
    build_stylesheet,
    get_layer_groups,
    write_stylesheet,
)


if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def carto() -> Palette:
    return load_palette("carto")


class TestLayerGroups:
    """Tests for draw order grouping."""

    def test_default_groups(self) -> None:
        """Test that tunnels come first and bridges last."""
        groups = get_layer_groups()
        assert [[style.name for style in group] for group in groups] == [
            ["tunnel"],
            ["road"],
            ["bridge"],
        ]

    def test_restricted_groups_use_class_variants(self) -> None:
        """Test that restriction replaces the base road with class variants."""
        surface = [style.name for style in get_layer_groups(restrict_to_class=True)[1]]
        assert "road" not in surface
        assert {"motorway", "service", "busway"}.issubset(surface)


class TestBuildRoadLayers:
    """Tests for build_road_layers."""

    def test_layer_order(self, carto: Palette) -> None:
        """Test that each group draws its casings before its fills."""
        ids = [layer["id"] for layer in build_road_layers(carto)]
        assert ids == [
            "road_tunnel_casing",
            "road_tunnel_fill",
            "road_road_casing",
            "road_road_fill",
            "road_bridge_casing",
            "road_bridge_fill",
        ]

    def test_restricted_ids_are_unique(self, carto: Palette) -> None:
        """Test that restricted layers get one id per variant and kind."""
        layers = build_road_layers(carto, restrict_to_class=True)
        ids = [layer["id"] for layer in layers]
        assert len(ids) == len(set(ids))
        assert ids.index("road_motorway_casing") < ids.index("road_trunk_fill")
        assert ids.index("road_service_casing") < ids.index("road_motorway_fill")

    @pytest.mark.parametrize("road_class", BASE_ROAD_CLASSES)
    @pytest.mark.parametrize("brunnel", [None, "bridge", "tunnel"])
    @pytest.mark.parametrize("ramp", [0, 1])
    def test_restricted_layers_cover_every_road(
        self, carto: Palette, road_class: str, brunnel: str | None, ramp: int
    ) -> None:
        """Test that restricted layers still draw every allowlisted road."""
        feature = {"class": road_class, "ramp": ramp}
        if brunnel is not None:
            feature["brunnel"] = brunnel
        layers = build_road_layers(carto, restrict_to_class=True)
        drawn_by = [layer["id"] for layer in layers if feature_matches(layer, feature, 12)]
        assert drawn_by
        assert any(layer_id.endswith("_fill") for layer_id in drawn_by)


class TestBuildStylesheet:
    """Tests for build_stylesheet and write_stylesheet."""

    def test_document_shape(self) -> None:
        """Test the style document fields."""
        config = StylesheetConfig(palette_name="carto", source_url="https://example.com/tiles")
        style = build_stylesheet(config)
        assert style["version"] == 8
        assert style["name"] == "Carto roads"
        assert style["sources"] == {
            "openmaptiles": {"type": "vector", "url": "https://example.com/tiles"}
        }
        assert all(layer["source"] == "openmaptiles" for layer in style["layers"])

    def test_document_is_json_serializable(self) -> None:
        """Test that no callables end up in the document."""
        style = build_stylesheet(StylesheetConfig(restrict_to_class=True))
        assert json.loads(json.dumps(style)) == style

    def test_write_stylesheet(self, tmp_path: Path) -> None:
        """Test writing a stylesheet to a nested path."""
        style = build_stylesheet(StylesheetConfig())
        output_file = tmp_path / "out" / "roads.json"

        result = write_stylesheet(style, output_file)

        assert result == output_file
        assert json.loads(output_file.read_text(encoding="utf-8")) == style

    def test_write_compact(self, tmp_path: Path) -> None:
        """Test that indent=None writes a single JSON line."""
        style = build_stylesheet(StylesheetConfig())
        output_file = tmp_path / "roads.json"

        write_stylesheet(style, output_file, indent=None)

        assert len(output_file.read_text(encoding="utf-8").splitlines()) == 1
