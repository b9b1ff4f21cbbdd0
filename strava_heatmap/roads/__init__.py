"""Background road network: Overpass provider, zoom filtering and loading."""

from .filtering import filter_by_zoom, max_importance_for_zoom, road_importance
from .loader import RoadLayerLoader
from .overpass import build_query, clear_road_cache, fetch_roads, parse_overpass_payload

__all__ = [
    "build_query",
    "clear_road_cache",
    "fetch_roads",
    "filter_by_zoom",
    "max_importance_for_zoom",
    "parse_overpass_payload",
    "road_importance",
    "RoadLayerLoader",
]
