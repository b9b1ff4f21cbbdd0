"""Bounding box computation and aspect-ratio matched expansion."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from ..config import BOUNDS_MIN_SPAN_DEG, ZOOM_EXPANDED_PADDING
from ..errors import EmptyBoundsError
from ..models import Bounds, DecodedRoute


def raw_bounds(points: Iterable[Sequence[float]]) -> Bounds:
    """Return the tightest box around ``points`` or ``Bounds.empty()``."""

    min_lat = min_lng = math.inf
    max_lat = max_lng = -math.inf
    for lat, lng in points:
        min_lat = min(min_lat, lat)
        max_lat = max(max_lat, lat)
        min_lng = min(min_lng, lng)
        max_lng = max(max_lng, lng)
    return Bounds(min_lat=min_lat, max_lat=max_lat, min_lng=min_lng, max_lng=max_lng)


def bounds_for_routes(routes: Iterable[DecodedRoute]) -> Bounds:
    """Return the raw bounds of every point in every route."""

    return raw_bounds(point for route in routes for point in route.points)


def expand(
    bounds: Bounds,
    aspect_ratio: float,
    padding_fraction: float = ZOOM_EXPANDED_PADDING,
    *,
    min_span: float = BOUNDS_MIN_SPAN_DEG,
) -> Bounds:
    """Grow ``bounds`` to ``aspect_ratio`` (lng span / lat span) plus padding.

    Only the deficient dimension grows; both spans are then scaled by
    ``1 + 2 * padding_fraction``. The result keeps the input's center.

    Raises:
        EmptyBoundsError: If ``bounds`` holds no points.
        ValueError: If ``aspect_ratio`` is not a positive finite number.
    """

    if bounds.is_empty:
        raise EmptyBoundsError("Cannot expand bounds without content")
    if not math.isfinite(aspect_ratio) or aspect_ratio <= 0:
        raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")
    if padding_fraction < 0:
        raise ValueError("padding_fraction must be >= 0")

    center_lat, center_lng = bounds.center
    lat_span = bounds.lat_span
    lng_span = bounds.lng_span
    if lat_span <= 0 and lng_span <= 0:
        lat_span = min_span

    # Compare without dividing so a single zero span stays safe.
    if lng_span > lat_span * aspect_ratio:
        lat_span = lng_span / aspect_ratio
    else:
        lng_span = lat_span * aspect_ratio

    scale = 1.0 + 2.0 * padding_fraction
    lat_span *= scale
    lng_span *= scale

    return Bounds(
        min_lat=center_lat - lat_span / 2.0,
        max_lat=center_lat + lat_span / 2.0,
        min_lng=center_lng - lng_span / 2.0,
        max_lng=center_lng + lng_span / 2.0,
    )
