"""Command line entry point: render activity polylines to a PNG heatmap."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence

from .config import (
    DEFAULT_DISPLAY_SCALE,
    DEFAULT_SURFACE_HEIGHT,
    DEFAULT_SURFACE_WIDTH,
    GROUP_GRID_SIZE_KM,
    OUTPUT_FILE,
    ROAD_NETWORK_ENABLED,
    REQUEST_TIMEOUT,
)
from .geometry.grouping import group_polylines, largest_group
from .map_view import HeatmapView
from .rendering.html_export import create_heatmap_html
from .rendering.surface import PillowSurface

LOGGER = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _polylines_from_json(payload: Any) -> List[str]:
    """Extract polylines from a list of strings or Strava activity objects."""

    if isinstance(payload, dict):
        payload = payload.get("activities", [])
    if not isinstance(payload, list):
        raise ValueError("Expected a JSON list of activities or polylines")
    polylines: List[str] = []
    for item in payload:
        if isinstance(item, str):
            polylines.append(item)
        elif isinstance(item, dict):
            summary = (item.get("map") or {}).get("summary_polyline")
            if summary:
                polylines.append(summary)
    return polylines


def load_polylines(path: Path) -> List[str]:
    """Read polylines from a JSON file or a text file with one per line."""

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return _polylines_from_json(json.loads(text))
    # Polylines may contain backslashes but never whitespace.
    return [line.strip() for line in text.splitlines() if line.strip()]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render Strava activity polylines as a heat-trail map image."
    )
    parser.add_argument("input", type=Path, help="JSON activities file or text file of polylines")
    parser.add_argument("--output", type=Path, default=Path(OUTPUT_FILE), help="PNG output path")
    parser.add_argument("--html", type=Path, help="Optional interactive HTML preview path")
    parser.add_argument("--width", type=int, default=DEFAULT_SURFACE_WIDTH)
    parser.add_argument("--height", type=int, default=DEFAULT_SURFACE_HEIGHT)
    parser.add_argument("--scale", type=float, default=DEFAULT_DISPLAY_SCALE, help="Display pixel ratio")
    parser.add_argument("--zoom", type=float, default=None, help="Zoom factor applied around the centre")
    parser.add_argument(
        "--no-roads",
        action="store_true",
        default=not ROAD_NETWORK_ENABLED,
        help="Skip the background road network",
    )
    parser.add_argument(
        "--largest-region",
        action="store_true",
        help=f"Only render the biggest group of activities ({GROUP_GRID_SIZE_KM:g} km grid)",
    )
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python -m strava_heatmap``."""

    args = _build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    try:
        polylines = load_polylines(args.input)
    except (OSError, ValueError) as exc:
        LOGGER.error("Failed to load polylines from '%s': %s", args.input, exc)
        return 1
    if args.largest_region:
        groups = group_polylines(polylines)
        polylines = largest_group(groups)
        LOGGER.info("Selected largest of %d regions (%d activities)", len(groups), len(polylines))

    surface = PillowSurface(args.width, args.height, args.scale)
    view = HeatmapView(surface, show_roads=not args.no_roads)
    try:
        view.set_polylines(polylines)
        if not view.has_content:
            LOGGER.warning("No decodable routes in '%s'; writing background only", args.input)
        if args.zoom is not None:
            view.controller.zoom_by(args.zoom)
        if view.is_loading:
            LOGGER.info("Waiting for road network ...")
            view.wait_for_roads(timeout=REQUEST_TIMEOUT * 2)
        surface.save(args.output)
        if args.html is not None and view.has_content:
            create_heatmap_html(view.routes, view.visible_roads, output_html_path=args.html)
            LOGGER.info("Saved HTML preview to %s", args.html)
    finally:
        view.close()
    return 0
