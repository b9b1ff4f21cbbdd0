"""Zoom-dependent selection of background roads."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from ..config import ROAD_CLASS_TIERS, ROAD_ZOOM_LEVELS
from ..models import RoadSegment

_CLASS_RANKS: Dict[str, int] = {
    road_class: rank
    for rank, tier in enumerate(ROAD_CLASS_TIERS)
    for road_class in tier
}

# Classes missing from the tier table are treated as the least important.
UNKNOWN_CLASS_RANK = len(ROAD_CLASS_TIERS)


def road_importance(road_class: str) -> int:
    """Return the importance rank of an OSM highway class (0 = major roads)."""

    return _CLASS_RANKS.get((road_class or "").strip().lower(), UNKNOWN_CLASS_RANK)


def max_importance_for_zoom(
    k: float, levels: Sequence[Tuple[float, int]] = ROAD_ZOOM_LEVELS
) -> int:
    """Return the least important rank still drawn at zoom scale ``k``.

    ``levels`` holds ``(min_zoom, max_rank)`` steps; the ranks never decrease
    as zoom grows, which keeps filtering monotonic.
    """

    allowed = -1
    for min_zoom, max_rank in sorted(levels):
        if k >= min_zoom:
            allowed = max(allowed, max_rank)
    if allowed < 0 and levels:
        allowed = min(rank for _, rank in levels)
    return allowed


def filter_by_zoom(roads: Iterable[RoadSegment], k: float) -> List[RoadSegment]:
    """Return the roads worth drawing at zoom scale ``k``, order preserved."""

    threshold = max_importance_for_zoom(k)
    return [road for road in roads if road.importance <= threshold]
