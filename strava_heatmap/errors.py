"""Central error types used across the application."""

from __future__ import annotations


class HeatmapError(Exception):
    """Base class for heatmap rendering failures."""


class PolylineDecodeError(HeatmapError, ValueError):
    """Raised when an encoded polyline string is malformed."""


class EmptyBoundsError(HeatmapError, ValueError):
    """Raised when bounds with no content reach projection or expansion."""


class RoadNetworkError(HeatmapError, RuntimeError):
    """Raised when the road network provider cannot deliver road geometry."""


__all__ = [
    "HeatmapError",
    "PolylineDecodeError",
    "EmptyBoundsError",
    "RoadNetworkError",
]
