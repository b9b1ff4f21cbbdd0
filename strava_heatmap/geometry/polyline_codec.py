"""Encoded polyline decoding with fail-soft handling of malformed input."""

from __future__ import annotations

import logging
from typing import List, Sequence

from polyline import decode as polyline_decode
from polyline import encode as polyline_encode

from ..config import POLYLINE_PRECISION
from ..errors import PolylineDecodeError
from ..models import LatLon

LOGGER = logging.getLogger(__name__)

_MIN_CHAR = 63
_MAX_CHAR = 126
_CONTINUATION_BIT = 0x20


def _validate_encoding(encoded: str) -> None:
    """Check the byte stream is complete before handing it to the decoder.

    Every character must be in the printable range used by the format, the
    final chunk must carry a terminator and values must come in lat/lng pairs.
    """

    values = 0
    in_chunk = False
    for position, char in enumerate(encoded):
        code = ord(char)
        if code < _MIN_CHAR or code > _MAX_CHAR:
            raise PolylineDecodeError(
                f"Invalid character {char!r} at position {position}"
            )
        if (code - _MIN_CHAR) & _CONTINUATION_BIT:
            in_chunk = True
        else:
            in_chunk = False
            values += 1
    if in_chunk:
        raise PolylineDecodeError("Truncated polyline: final chunk has no terminator")
    if values % 2:
        raise PolylineDecodeError("Truncated polyline: odd number of coordinates")


def decode_polyline_strict(encoded: str) -> List[LatLon]:
    """Decode ``encoded`` into ``(lat, lng)`` tuples, raising on malformed data."""

    if not encoded:
        return []
    if not isinstance(encoded, str):
        raise PolylineDecodeError(f"Expected str, got {type(encoded).__name__}")
    _validate_encoding(encoded)
    try:
        decoded = polyline_decode(encoded, POLYLINE_PRECISION)
    except (IndexError, ValueError, TypeError) as exc:
        raise PolylineDecodeError("Unable to decode polyline") from exc
    return [(float(lat), float(lng)) for lat, lng in decoded]


def decode_polyline(encoded: str) -> List[LatLon]:
    """Decode an encoded polyline, returning ``[]`` when it is malformed."""

    try:
        return decode_polyline_strict(encoded)
    except PolylineDecodeError as exc:
        LOGGER.debug("Skipping malformed polyline: %s", exc)
        return []


def encode_polyline(points: Sequence[Sequence[float]]) -> str:
    """Encode ``(lat, lng)`` pairs with the same precision used for decoding."""

    return polyline_encode([(float(lat), float(lng)) for lat, lng in points], POLYLINE_PRECISION)
