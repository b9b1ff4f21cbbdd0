"""Pan/zoom state machine driven by pointer, wheel and pinch input."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..config import (
    FIT_EXTENT_MARGIN_PX,
    ZOOM_EXPANDED_PADDING,
    ZOOM_INITIAL,
    ZOOM_MAX,
    ZOOM_MIN,
    ZOOM_TRANSLATE_PADDING,
)
from ..models import Transform

LOGGER = logging.getLogger(__name__)

TransformListener = Callable[[Transform], None]

# Wheel delta multipliers per DOM deltaMode (pixel, line, page).
_WHEEL_PIXEL = 0.002
_WHEEL_LINE = 0.05
_WHEEL_PAGE = 1.0

# Wheel steps are clamped to 2 ** +/-60, far beyond any zoom range.
_MAX_WHEEL_EXPONENT = 60.0


@dataclass(frozen=True, slots=True)
class ZoomSettings:
    min_zoom: float = ZOOM_MIN
    max_zoom: float = ZOOM_MAX
    translate_padding: float = ZOOM_TRANSLATE_PADDING
    expanded_padding: float = ZOOM_EXPANDED_PADDING
    initial_zoom: float = ZOOM_INITIAL
    fit_margin: float = FIT_EXTENT_MARGIN_PX

    def __post_init__(self) -> None:
        if self.min_zoom <= 0 or self.max_zoom < self.min_zoom:
            raise ValueError("zoom range must satisfy 0 < min_zoom <= max_zoom")
        if self.translate_padding < 0:
            raise ValueError("translate_padding must be >= 0")


class ZoomPanController:
    """Own the view transform and keep it inside the configured limits.

    Only this class mutates the transform. Listeners are notified after every
    change so the view can redraw (and refilter roads for the new scale).
    """

    def __init__(
        self,
        width: float,
        height: float,
        settings: Optional[ZoomSettings] = None,
    ) -> None:
        self.settings = settings or ZoomSettings()
        self._width = float(width)
        self._height = float(height)
        self._listeners: List[TransformListener] = []
        self._drag_origin: Optional[Tuple[float, float]] = None
        self._transform = self._constrain(Transform(self.settings.initial_zoom, 0.0, 0.0))

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def is_dragging(self) -> bool:
        return self._drag_origin is not None

    def subscribe(self, listener: TransformListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------
    def reset(self) -> Transform:
        """Return to the initial zoom with no translation."""

        self._drag_origin = None
        return self._set(Transform(self.settings.initial_zoom, 0.0, 0.0))

    def resize(self, width: float, height: float) -> Transform:
        self._width = float(width)
        self._height = float(height)
        return self._set(self._transform)

    def pointer_down(self, x: float, y: float) -> None:
        self._drag_origin = (x, y)

    def pointer_move(self, x: float, y: float) -> Transform:
        if self._drag_origin is None:
            return self._transform
        last_x, last_y = self._drag_origin
        self._drag_origin = (x, y)
        t = self._transform
        return self._set(Transform(t.k, t.x + (x - last_x), t.y + (y - last_y)))

    def pointer_up(self) -> None:
        self._drag_origin = None

    def wheel(self, delta_y: float, x: float, y: float, delta_mode: int = 0) -> Transform:
        """Zoom around the pointer; negative deltas zoom in."""

        if delta_mode == 1:
            multiplier = _WHEEL_LINE
        elif delta_mode:
            multiplier = _WHEEL_PAGE
        else:
            multiplier = _WHEEL_PIXEL
        if not math.isfinite(delta_y):
            LOGGER.debug("Ignoring non-finite wheel delta %r", delta_y)
            return self._transform
        exponent = max(-_MAX_WHEEL_EXPONENT, min(_MAX_WHEEL_EXPONENT, -delta_y * multiplier))
        return self.zoom_to(self._transform.k * 2.0 ** exponent, (x, y))

    def pinch(self, scale_ratio: float, x: float, y: float) -> Transform:
        """Apply a pinch gesture scale change centred between the fingers."""

        return self.zoom_by(scale_ratio, (x, y))

    def double_click(self, x: float, y: float) -> bool:
        """Double-click zoom is disabled; the transform is left untouched."""

        return False

    def zoom_by(self, factor: float, anchor: Optional[Tuple[float, float]] = None) -> Transform:
        """Scale by ``factor`` keeping the content under ``anchor`` fixed."""

        if not math.isfinite(factor) or factor <= 0:
            LOGGER.debug("Ignoring invalid zoom factor %r", factor)
            return self._transform
        if anchor is None:
            anchor = (self._width / 2.0, self._height / 2.0)
        return self.zoom_to(self._transform.k * factor, anchor)

    def zoom_to(self, k: float, anchor: Tuple[float, float]) -> Transform:
        t = self._transform
        new_k = self._clamp_scale(k)
        ax, ay = anchor
        world_x, world_y = t.invert(ax, ay)
        return self._set(Transform(new_k, ax - world_x * new_k, ay - world_y * new_k))

    # ------------------------------------------------------------------
    # Constraints
    # ------------------------------------------------------------------
    def translate_extent(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """World-space rectangle the viewport may show."""

        pad = self.settings.translate_padding
        return (
            (-self._width * pad, -self._height * pad),
            (self._width * (1.0 + pad), self._height * (1.0 + pad)),
        )

    def _clamp_scale(self, k: float) -> float:
        if not math.isfinite(k):
            k = self.settings.max_zoom if k > 0 else self.settings.min_zoom
        return min(self.settings.max_zoom, max(self.settings.min_zoom, k))

    def _constrain(self, transform: Transform) -> Transform:
        k = self._clamp_scale(transform.k)
        t = Transform(k, transform.x, transform.y)
        (ex0, ey0), (ex1, ey1) = self.translate_extent()
        left, top = t.invert(0.0, 0.0)
        right, bottom = t.invert(self._width, self._height)
        dx0, dx1 = left - ex0, right - ex1
        dy0, dy1 = top - ey0, bottom - ey1
        # Viewport wider than the extent: centre it; otherwise pull it back in.
        shift_x = (dx0 + dx1) / 2.0 if dx1 > dx0 else (min(0.0, dx0) or max(0.0, dx1))
        shift_y = (dy0 + dy1) / 2.0 if dy1 > dy0 else (min(0.0, dy0) or max(0.0, dy1))
        return t.translate(shift_x, shift_y)

    def _set(self, transform: Transform) -> Transform:
        constrained = self._constrain(transform)
        if constrained == self._transform:
            return constrained
        self._transform = constrained
        for listener in list(self._listeners):
            listener(constrained)
        return constrained
