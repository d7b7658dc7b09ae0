"""Command-line interface for roadlayers."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

from .config import DEFAULT_SOURCE_URL, StylesheetConfig
from .expressions import ExpressionError
from .palettes import (
    DEFAULT_PALETTE,
    Palette,
    PaletteValidationError,
    get_available_palettes,
    get_palettes_dir,
    load_palette_file,
)
from .roads import ROAD_STYLES
from .stylesheet import build_stylesheet, write_stylesheet


__all__ = ["cli", "main"]

logger = logging.getLogger(__name__)


def _list_palettes() -> None:
    """List all available palettes with descriptions."""
    available_palettes = get_available_palettes()
    if not available_palettes:
        print("No palettes found in 'palettes/' directory.")
        return

    palettes_dir = get_palettes_dir()

    print("\nAvailable Palettes:")
    print("-" * 60)
    for palette_name in available_palettes:
        try:
            palette = load_palette_file(palettes_dir / f"{palette_name}.json")
        except (OSError, ValueError) as exc:
            print(f"  {palette_name}")
            print(f"    (invalid: {exc})")
            continue

        print(f"  {palette_name}")
        print(f"    {palette.name}")
        if palette.description:
            print(f"    {palette.description}")
        print()


def _list_roads() -> None:
    """List the road style variants."""
    print("\nRoad Styles:")
    print("-" * 60)
    for name, style in ROAD_STYLES.items():
        restricted = "class filter" if style.filter is not None else "all classes"
        print(f"  {name:<14} brunnel={style.brunnel:<8} {restricted}")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="roadlayers",
        description="Generate vector-tile style layers for roads",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  roadlayers --palette carto --output style/roads.json
  roadlayers --restrict-classes --indent 0
  roadlayers --preview roads.png --zoom 14
  roadlayers --list-palettes
        """,
    )

    parser.add_argument(
        "--palette",
        "-p",
        type=str,
        default=DEFAULT_PALETTE,
        help=f"Palette name (default: {DEFAULT_PALETTE})",
    )
    parser.add_argument(
        "--palette-file",
        type=str,
        help="JSON palette file (overrides --palette)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Stylesheet output path (default: styles/<palette>_roads_<timestamp>.json)",
    )
    parser.add_argument(
        "--source-url",
        type=str,
        default=DEFAULT_SOURCE_URL,
        help="Vector tile source URL written to the stylesheet",
    )
    parser.add_argument(
        "--restrict-classes",
        dest="restrict_classes",
        action="store_true",
        help="Emit one layer pair per road class, filtered to that class",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation, 0 for compact output (default: 2)",
    )
    parser.add_argument(
        "--preview",
        type=str,
        metavar="FILE",
        help="Also render a legend preview image",
    )
    parser.add_argument(
        "--zoom",
        "-z",
        type=float,
        default=12.0,
        help="Zoom level for the preview (default: 12)",
    )
    parser.add_argument(
        "--list-palettes",
        action="store_true",
        help="List all available palettes",
    )
    parser.add_argument(
        "--list-roads",
        action="store_true",
        help="List the road style variants",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="store_true",
        help="Show version and exit",
    )

    return parser


def _handle_info_commands(parsed: argparse.Namespace) -> int | None:
    """Handle informational commands that exit early.

    Returns:
        Exit code if handled, None if not handled.
    """
    if parsed.version:
        from . import __version__

        print(f"roadlayers {__version__}")
        return 0

    if parsed.list_palettes:
        _list_palettes()
        return 0

    if parsed.list_roads:
        _list_roads()
        return 0

    return None


def _resolve_palette(parsed: argparse.Namespace) -> tuple[Palette | None, str] | int:
    """Resolve the palette options.

    Returns:
        Tuple of (palette, palette_name) on success, or int exit code on error.
        The palette is None when it should be loaded by name.
    """
    if parsed.palette_file:
        palette_path = Path(parsed.palette_file).expanduser()
        if palette_path.suffix.lower() != ".json":
            print("Error: Palette file must be a JSON file.")
            return 1
        if not palette_path.is_file():
            print("Error: Palette file not found.")
            return 1
        try:
            palette = load_palette_file(palette_path)
        except (OSError, ValueError) as exc:
            print(f"Error: Failed to load palette file: {exc}")
            return 1
        return (palette, palette_path.stem)

    available_palettes = get_available_palettes()
    if parsed.palette not in available_palettes:
        print(f"Error: Palette '{parsed.palette}' not found.")
        print(f"Available palettes: {', '.join(available_palettes)}")
        return 1
    return (None, parsed.palette)


def cli(args: list[str] | None = None) -> int:
    """Run the CLI with the given arguments.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    parser = create_parser()
    parsed = parser.parse_args(args)

    info_result = _handle_info_commands(parsed)
    if info_result is not None:
        return info_result

    palette_result = _resolve_palette(parsed)
    if isinstance(palette_result, int):
        return palette_result
    palette, palette_name = palette_result

    try:
        config = StylesheetConfig(
            palette_name=palette_name,
            source_url=parsed.source_url,
            restrict_to_class=parsed.restrict_classes,
            palette=palette,
        )
        style = build_stylesheet(config)
        output_file = Path(parsed.output).expanduser() if parsed.output else config.get_output_path()
        write_stylesheet(style, output_file, indent=parsed.indent or None)

        if parsed.preview:
            from .preview import render_preview

            render_preview(
                Path(parsed.preview).expanduser(),
                palette=config.palette,
                zoom=parsed.zoom,
                restrict_to_class=parsed.restrict_classes,
            )
    except (OSError, PaletteValidationError, ExpressionError) as exc:
        print(f"\n✗ Error: {exc}")
        return 1

    print(f"✓ Stylesheet written to {output_file}")
    return 0


def main() -> NoReturn:
    """Main entry point."""
    sys.exit(cli())


if __name__ == "__main__":
    main()
