"""Tests for the preview module."""

from __future__ import annotations

from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import pytest

from roadlayers.palettes import load_palette
from roadlayers.preview import PREVIEW_FEATURES, render_preview


if TYPE_CHECKING:
    from pathlib import Path


class TestRenderPreview:
    """Tests for render_preview."""

    def test_writes_png(self, tmp_path: Path) -> None:
        """Test that a preview image is written."""
        output_file = tmp_path / "preview.png"
        result = render_preview(output_file, palette=load_palette("carto"), zoom=14, dpi=50)
        assert result == output_file
        assert output_file.read_bytes().startswith(b"\x89PNG")

    def test_writes_svg(self, tmp_path: Path) -> None:
        """Test that the format follows the extension."""
        output_file = tmp_path / "nested" / "preview.svg"
        render_preview(output_file, zoom=9)
        assert "<svg" in output_file.read_text(encoding="utf-8")

    @pytest.mark.parametrize("zoom", [2.0, 20.0])
    def test_zoom_outside_layer_range(self, tmp_path: Path, zoom: float) -> None:
        """Test that zooms with no visible layer still render a legend."""
        output_file = tmp_path / "empty.png"
        render_preview(output_file, zoom=zoom, dpi=50)
        assert output_file.exists()

    def test_figures_are_closed(self, tmp_path: Path) -> None:
        """Test that no figure is left open after rendering."""
        before = len(plt.get_fignums())
        render_preview(tmp_path / "preview.png", dpi=50)
        assert len(plt.get_fignums()) == before

    def test_preview_features_are_road_classes(self) -> None:
        """Test that every legend row has a class."""
        assert all(isinstance(feature["class"], str) for _, feature in PREVIEW_FEATURES)
