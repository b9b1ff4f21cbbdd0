"""Stroke styles for the road and route layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..config import (
    MAP_BACKGROUND,
    ROAD_COLOR,
    ROAD_OPACITY,
    ROAD_WIDTH,
    ROUTE_BLUR,
    ROUTE_COLOR,
    ROUTE_OPACITY,
    ROUTE_SINGLE_WIDTH,
    ROUTE_WIDTH,
)


class BlendMode(Enum):
    """How a stroke combines with what is already on the surface."""

    NORMAL = "normal"
    MULTIPLY = "multiply"


@dataclass(frozen=True, slots=True)
class StrokeStyle:
    """Everything a surface needs for one stroke call.

    ``width`` is in user units and is scaled by the current transform like the
    geometry. ``blur_radius`` is in screen pixels.
    """

    color: str
    width: float
    opacity: float = 1.0
    blend_mode: BlendMode = BlendMode.NORMAL
    blur_radius: float = 0.0


@dataclass(frozen=True, slots=True)
class RoadStyle:
    color: str = ROAD_COLOR
    width: float = ROAD_WIDTH
    opacity: float = ROAD_OPACITY


@dataclass(frozen=True, slots=True)
class RouteStyle:
    color: str = ROUTE_COLOR
    single_width: float = ROUTE_SINGLE_WIDTH
    width: float = ROUTE_WIDTH
    opacity: float = ROUTE_OPACITY
    blur: float = ROUTE_BLUR


@dataclass(frozen=True, slots=True)
class MapStyle:
    """Complete look of the map: background plus both line layers."""

    background: str = MAP_BACKGROUND
    road: RoadStyle = field(default_factory=RoadStyle)
    route: RouteStyle = field(default_factory=RouteStyle)

    def road_stroke(self, k: float) -> StrokeStyle:
        # Dividing by k keeps the on-screen width constant while zooming.
        return StrokeStyle(
            color=self.road.color,
            width=self.road.width / k,
            opacity=self.road.opacity,
        )

    def route_stroke(self, k: float, single_route: bool) -> StrokeStyle:
        base_width = self.route.single_width if single_route else self.route.width
        return StrokeStyle(
            color=self.route.color,
            width=base_width / k,
            opacity=self.route.opacity,
            blend_mode=BlendMode.NORMAL if single_route else BlendMode.MULTIPLY,
            blur_radius=self.route.blur,
        )


DEFAULT_STYLE = MapStyle()
