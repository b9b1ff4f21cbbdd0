"""Web Mercator projection fitted to a bounding box and surface size."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray
from pyproj import CRS, Transformer

from ..config import FIT_EXTENT_MARGIN_PX
from ..errors import EmptyBoundsError
from ..models import Bounds

PixelArray = NDArray[np.float64]

# Web Mercator is undefined at the poles.
MAX_MERCATOR_LAT = 85.05112878


@lru_cache(maxsize=1)
def _mercator_transformer() -> Transformer:
    """Return the shared WGS84 -> Web Mercator transformer."""

    return Transformer.from_crs(CRS.from_epsg(4326), CRS.from_epsg(3857), always_xy=True)


def _to_mercator(lats: NDArray[np.float64], lngs: NDArray[np.float64]) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    clipped = np.clip(lats, -MAX_MERCATOR_LAT, MAX_MERCATOR_LAT)
    xs, ys = _mercator_transformer().transform(lngs, clipped)
    return np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)


def _fit_scale(
    target: Bounds, cx: float, cy: float, drawable_w: float, drawable_h: float
) -> Optional[float]:
    """Pixels per metre that keep ``target`` inside the drawable area, or None."""

    xs, ys = _to_mercator(
        np.array([target.min_lat, target.max_lat], dtype=float),
        np.array([target.min_lng, target.max_lng], dtype=float),
    )
    # Mercator stretches northwards, so fit each half around the center.
    half_x = float(np.max(np.abs(xs - cx)))
    half_y = float(np.max(np.abs(ys - cy)))
    candidates = []
    if half_x > 0:
        candidates.append(drawable_w / (2.0 * half_x))
    if half_y > 0:
        candidates.append(drawable_h / (2.0 * half_y))
    return min(candidates) if candidates else None


@dataclass(frozen=True, slots=True)
class Projection:
    """Forward mapping from ``(lat, lng)`` to surface pixels.

    Pixel ``x`` grows eastwards and ``y`` grows southwards. The bounds center
    lands on the surface center and the fitted content stays inside the margin.
    """

    center_x: float
    center_y: float
    scale: float
    width: float
    height: float

    @classmethod
    def fit(
        cls,
        bounds: Bounds,
        width: float,
        height: float,
        margin: float = FIT_EXTENT_MARGIN_PX,
        *,
        content: Optional[Bounds] = None,
    ) -> "Projection":
        """Build a projection centred on ``bounds`` that fits ``content``.

        ``content`` (the route extent) is scaled to reach the margin on its
        limiting axis; it defaults to ``bounds``. When ``content`` is a
        single point the scale comes from ``bounds`` instead.

        Raises:
            EmptyBoundsError: If ``bounds`` or ``content`` holds no points.
            ValueError: If the surface minus the margin has no area.
        """

        if bounds.is_empty or (content is not None and content.is_empty):
            raise EmptyBoundsError("Cannot project empty bounds")
        drawable_w = width - 2.0 * margin
        drawable_h = height - 2.0 * margin
        if drawable_w <= 0 or drawable_h <= 0:
            raise ValueError(
                f"Surface {width}x{height} leaves no room inside a {margin}px margin"
            )

        center_lat, center_lng = bounds.center
        xs, ys = _to_mercator(np.array([center_lat], dtype=float), np.array([center_lng], dtype=float))
        cx, cy = float(xs[0]), float(ys[0])

        scale = None
        for target in (content, bounds):
            if target is None:
                continue
            scale = _fit_scale(target, cx, cy, drawable_w, drawable_h)
            if scale is not None:
                break
        return cls(
            center_x=cx,
            center_y=cy,
            scale=float(scale or 1.0),
            width=float(width),
            height=float(height),
        )

    def project(self, lat: float, lng: float) -> Tuple[float, float]:
        """Project a single point to surface pixels."""

        pixels = self.project_points([(lat, lng)])
        return float(pixels[0, 0]), float(pixels[0, 1])

    def project_points(self, points: Iterable[Sequence[float]]) -> PixelArray:
        """Project ``(lat, lng)`` pairs into an ``(N, 2)`` pixel array."""

        array = np.asarray(list(points), dtype=float)
        if array.size == 0:
            return np.empty((0, 2), dtype=float)
        if array.ndim != 2 or array.shape[1] != 2:
            raise ValueError("Expected a sequence of (lat, lng) pairs")
        xs, ys = _to_mercator(array[:, 0], array[:, 1])
        px = self.width / 2.0 + (xs - self.center_x) * self.scale
        py = self.height / 2.0 - (ys - self.center_y) * self.scale
        return np.column_stack((px, py))
