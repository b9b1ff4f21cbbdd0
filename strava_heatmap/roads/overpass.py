"""Road network provider backed by the OpenStreetMap Overpass API."""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import requests
from cachetools import TTLCache
from requests import Session

from ..config import (
    OVERPASS_QUERY_TIMEOUT,
    OVERPASS_URL,
    REQUEST_TIMEOUT,
    ROAD_CACHE_SIZE,
    ROAD_CACHE_TTL_SECONDS,
    ROAD_CLASS_TIERS,
)
from ..errors import RoadNetworkError
from ..models import Bounds, LatLon, RoadSegment
from .filtering import road_importance
from .session import get_overpass_session

LOGGER = logging.getLogger(__name__)

_BoundsKey = Tuple[float, float, float, float]

# Module-level TTL+LRU cache of parsed road layers keyed by rounded bounds.
_road_cache: TTLCache[_BoundsKey, List[RoadSegment]] = TTLCache(
    maxsize=max(1, ROAD_CACHE_SIZE), ttl=max(1, ROAD_CACHE_TTL_SECONDS)
)
_road_cache_lock = RLock()


def _bounds_key(bounds: Bounds) -> _BoundsKey:
    return (
        round(bounds.min_lat, 5),
        round(bounds.min_lng, 5),
        round(bounds.max_lat, 5),
        round(bounds.max_lng, 5),
    )


def build_query(bounds: Bounds, road_classes: Optional[Iterable[str]] = None) -> str:
    """Return an Overpass QL query for highway ways inside ``bounds``."""

    if bounds.is_empty:
        raise ValueError("Cannot query roads for empty bounds")
    classes = list(road_classes) if road_classes is not None else [
        road_class for tier in ROAD_CLASS_TIERS for road_class in tier
    ]
    pattern = "|".join(classes)
    bbox = (
        f"{bounds.min_lat:.6f},{bounds.min_lng:.6f},"
        f"{bounds.max_lat:.6f},{bounds.max_lng:.6f}"
    )
    return (
        f"[out:json][timeout:{OVERPASS_QUERY_TIMEOUT}];"
        f'way["highway"~"^({pattern})$"]({bbox});'
        "out geom;"
    )


def _parse_geometry(raw: Any) -> List[LatLon]:
    points: List[LatLon] = []
    for node in raw or []:
        if not isinstance(node, Mapping):
            continue
        lat = node.get("lat")
        lon = node.get("lon")
        if lat is None or lon is None:
            continue
        points.append((float(lat), float(lon)))
    return points


def parse_overpass_payload(payload: Mapping[str, Any]) -> List[RoadSegment]:
    """Convert an Overpass ``out geom`` JSON payload into road segments."""

    roads: List[RoadSegment] = []
    for element in payload.get("elements", []) or []:
        if not isinstance(element, Mapping) or element.get("type") != "way":
            continue
        points = _parse_geometry(element.get("geometry"))
        if len(points) < 2:
            continue
        tags = dict(element.get("tags") or {})
        road_class = str(tags.get("highway", ""))
        roads.append(
            RoadSegment(
                way_id=int(element.get("id", 0)),
                points=points,
                road_class=road_class,
                importance=road_importance(road_class),
                tags=tags,
            )
        )
    return roads


def fetch_roads(
    bounds: Bounds,
    *,
    session: Optional[Session] = None,
    url: str = OVERPASS_URL,
    use_cache: bool = True,
) -> List[RoadSegment]:
    """Fetch the road network covering ``bounds``.

    Raises:
        RoadNetworkError: On transport failures, HTTP errors or payloads that
            are not valid Overpass JSON.
    """

    cache_key = _bounds_key(bounds)
    if use_cache:
        with _road_cache_lock:
            cached = _road_cache.get(cache_key)
        if cached is not None:
            LOGGER.debug("Road cache hit for bounds=%s", cache_key)
            return list(cached)

    query = build_query(bounds)
    http = session or get_overpass_session()
    LOGGER.debug("POST %s bounds=%s", url, cache_key)
    try:
        response = http.post(url, data={"data": query}, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        payload = response.json()
    except ValueError as exc:
        raise RoadNetworkError("Road network response was not valid JSON") from exc
    except requests.RequestException as exc:
        raise RoadNetworkError(f"Road network request failed: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise RoadNetworkError("Unexpected road network payload shape")

    roads = parse_overpass_payload(payload)
    LOGGER.info("Fetched %d road segments for bounds=%s", len(roads), cache_key)
    if use_cache:
        with _road_cache_lock:
            _road_cache[cache_key] = roads
    return list(roads)


def clear_road_cache() -> None:
    """Drop every memoised road layer."""

    with _road_cache_lock:
        _road_cache.clear()
