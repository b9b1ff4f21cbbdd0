"""Point recurrence counting across every decoded route."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Sequence

from ..models import DecodedRoute, LatLon
from .polyline_codec import decode_polyline


def point_key(lat: float, lng: float) -> str:
    """Quantise a point to the 5-decimal grid used for recurrence counting."""

    return f"{lat:.5f},{lng:.5f}"


def aggregate(routes_raw: Iterable[Sequence[LatLon]]) -> List[DecodedRoute]:
    """Annotate each route with its frequency and normalised intensity.

    A route's ``frequency`` is the highest occurrence count among its own
    points, where each occurrence of a point in any route (including repeats
    inside the same route) counts once. ``intensity`` rescales that value
    against the most repeated point in the whole dataset.
    """

    routes = [list(points) for points in routes_raw]
    counts: Counter[str] = Counter()
    global_max = 1
    for points in routes:
        for lat, lng in points:
            key = point_key(lat, lng)
            counts[key] += 1
            if counts[key] > global_max:
                global_max = counts[key]

    aggregated: List[DecodedRoute] = []
    for points in routes:
        frequency = max(
            (counts.get(point_key(lat, lng), 1) for lat, lng in points),
            default=1,
        )
        if global_max == 1:
            intensity = 0.0
        else:
            intensity = (frequency - 1) / (global_max - 1)
            intensity = min(1.0, max(0.0, intensity))
        aggregated.append(
            DecodedRoute(points=points, frequency=frequency, intensity=intensity)
        )
    return aggregated


def decode_routes(polylines: Iterable[str]) -> List[DecodedRoute]:
    """Decode every polyline once and aggregate the resulting routes."""

    return aggregate(decode_polyline(line) for line in polylines)
