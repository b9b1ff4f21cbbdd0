"""Render aggregated Strava route history as a zoomable heat-trail map."""

from .errors import EmptyBoundsError, HeatmapError, PolylineDecodeError, RoadNetworkError
from .map_view import HeatmapView
from .models import Bounds, DecodedRoute, RoadSegment, Transform

__all__ = [
    "Bounds",
    "DecodedRoute",
    "EmptyBoundsError",
    "HeatmapError",
    "HeatmapView",
    "PolylineDecodeError",
    "RoadNetworkError",
    "RoadSegment",
    "Transform",
]
