"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable route, road and surface
fixtures shared across the geometry, rendering and view tests.
"""
from __future__ import annotations

import os
import sys
from typing import List, Sequence, Tuple

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from strava_heatmap.models import RoadSegment, Transform
from strava_heatmap.rendering.styles import StrokeStyle
from strava_heatmap.rendering.surface import DrawingSurface
from strava_heatmap.roads.filtering import road_importance


# --- Factory helpers -------------------------------------------------
class RecordingSurface(DrawingSurface):
    """Surface that records every call instead of drawing pixels."""

    def __init__(self, width: int = 400, height: int = 200, display_scale: float = 1.0) -> None:
        super().__init__(width, height, display_scale)
        self.calls: List[Tuple[str, object]] = []

    def reset(self, background: str) -> None:
        self.calls.append(("reset", background))

    def set_transform(self, transform: Transform) -> None:
        super().set_transform(transform)
        self.calls.append(("transform", transform))

    def stroke_paths(self, paths: Sequence[np.ndarray], style: StrokeStyle) -> None:
        self.calls.append(("stroke", (len(paths), style)))

    def strokes(self) -> List[StrokeStyle]:
        return [payload[1] for name, payload in self.calls if name == "stroke"]


def make_road(way_id: int, road_class: str, start=(40.0, -3.0)) -> RoadSegment:
    lat, lng = start
    return RoadSegment(
        way_id=way_id,
        points=[(lat, lng), (lat + 0.001, lng + 0.001)],
        road_class=road_class,
        importance=road_importance(road_class),
    )


def make_road_network() -> List[RoadSegment]:
    classes = [
        "motorway",
        "primary",
        "secondary",
        "tertiary",
        "residential",
        "cycleway",
        "footway",
        "bridleway",
    ]
    return [make_road(idx + 1, road_class) for idx, road_class in enumerate(classes)]


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def recording_surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def road_network() -> List[RoadSegment]:
    return make_road_network()


@pytest.fixture
def shared_point_routes():
    """Two routes that meet at (40.001, -3.001)."""

    route_a = [(40.000, -3.000), (40.001, -3.001)]
    route_b = [(40.001, -3.001), (40.002, -3.002)]
    return [route_a, route_b]
