"""Pure geometry helpers: polyline decoding, frequency, bounds and projection."""

from .bounds import bounds_for_routes, expand, raw_bounds
from .frequency import aggregate, decode_routes, point_key
from .grouping import group_polylines, largest_group
from .polyline_codec import decode_polyline, decode_polyline_strict, encode_polyline
from .projection import Projection

__all__ = [
    "aggregate",
    "bounds_for_routes",
    "decode_polyline",
    "decode_polyline_strict",
    "decode_routes",
    "encode_polyline",
    "expand",
    "group_polylines",
    "largest_group",
    "point_key",
    "Projection",
    "raw_bounds",
]
