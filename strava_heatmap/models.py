"""Dataclasses shared by the geometry, road and rendering layers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple


LatLon = Tuple[float, float]


@dataclass(slots=True)
class DecodedRoute:
    """Decoded activity path annotated with how heavily it repeats others."""

    points: List[LatLon]
    frequency: int = 1
    intensity: float = 0.0


@dataclass(frozen=True, slots=True)
class Bounds:
    """Axis-aligned latitude/longitude rectangle."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @classmethod
    def empty(cls) -> "Bounds":
        """Return the sentinel produced by folding over no points."""

        return cls(math.inf, -math.inf, math.inf, -math.inf)

    @property
    def is_empty(self) -> bool:
        return self.min_lat > self.max_lat or self.min_lng > self.max_lng

    @property
    def lat_span(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lng_span(self) -> float:
        return self.max_lng - self.min_lng

    @property
    def center(self) -> LatLon:
        return (
            (self.min_lat + self.max_lat) / 2.0,
            (self.min_lng + self.max_lng) / 2.0,
        )

    def contains(self, lat: float, lng: float) -> bool:
        return (
            self.min_lat <= lat <= self.max_lat
            and self.min_lng <= lng <= self.max_lng
        )


@dataclass(frozen=True, slots=True)
class Transform:
    """Pan/zoom state: screen = world * k + (x, y)."""

    k: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def apply(self, px: float, py: float) -> Tuple[float, float]:
        return px * self.k + self.x, py * self.k + self.y

    def invert(self, sx: float, sy: float) -> Tuple[float, float]:
        return (sx - self.x) / self.k, (sy - self.y) / self.k

    def translate(self, dx: float, dy: float) -> "Transform":
        """Translate by a world-space offset (scaled by ``k``)."""

        return Transform(self.k, self.x + self.k * dx, self.y + self.k * dy)


IDENTITY = Transform()


@dataclass(slots=True)
class RoadSegment:
    """One OSM way of the background road network."""

    way_id: int
    points: List[LatLon]
    road_class: str
    importance: int
    tags: dict = field(default_factory=dict)


__all__ = [
    "LatLon",
    "DecodedRoute",
    "Bounds",
    "Transform",
    "IDENTITY",
    "RoadSegment",
]
