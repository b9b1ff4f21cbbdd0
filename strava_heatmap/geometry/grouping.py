"""Split activities into regional groups so distant trips render separately."""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Tuple

from ..config import GROUP_GRID_SIZE_KM
from .polyline_codec import decode_polyline

LOGGER = logging.getLogger(__name__)

# One degree of latitude is roughly 111 km.
_KM_PER_DEGREE = 111.0


def group_polylines(
    polylines: Iterable[str], grid_size_km: float = GROUP_GRID_SIZE_KM
) -> List[List[str]]:
    """Bucket polylines by the grid cell containing their mean point.

    Polylines that decode to nothing are dropped. Groups keep the order in
    which their first member appeared.
    """

    if grid_size_km <= 0:
        raise ValueError("grid_size_km must be greater than zero")
    cell_deg = grid_size_km / _KM_PER_DEGREE
    groups: Dict[Tuple[int, int], List[str]] = {}
    skipped = 0
    for line in polylines:
        points = decode_polyline(line)
        if not points:
            skipped += 1
            continue
        mean_lat = sum(lat for lat, _ in points) / len(points)
        mean_lng = sum(lng for _, lng in points) / len(points)
        cell = (math.floor(mean_lng / cell_deg), math.floor(mean_lat / cell_deg))
        groups.setdefault(cell, []).append(line)
    if skipped:
        LOGGER.info("Skipped %d activities without usable geometry", skipped)
    return list(groups.values())


def largest_group(groups: List[List[str]]) -> List[str]:
    """Return the group with the most activities (first one wins ties)."""

    if not groups:
        return []
    return max(groups, key=len)
