"""Owned state for one interactive heatmap view.

``HeatmapView`` ties the pieces together: it rebuilds routes, bounds and the
projection when the input polylines change, asks the road loader for a new
layer, and redraws the whole surface whenever the transform or road data
changes.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Iterable, List, Optional

from .config import ROAD_NETWORK_ENABLED
from .geometry.bounds import bounds_for_routes, expand
from .geometry.frequency import decode_routes
from .geometry.projection import Projection
from .interaction.zoom_pan import ZoomPanController, ZoomSettings
from .models import Bounds, DecodedRoute, RoadSegment, Transform
from .rendering.renderer import render
from .rendering.styles import DEFAULT_STYLE, MapStyle
from .rendering.surface import DrawingSurface
from .roads.filtering import filter_by_zoom
from .roads.loader import RoadLayerLoader

LOGGER = logging.getLogger(__name__)


class HeatmapView:
    def __init__(
        self,
        surface: Optional[DrawingSurface],
        *,
        show_roads: bool = ROAD_NETWORK_ENABLED,
        settings: Optional[ZoomSettings] = None,
        style: MapStyle = DEFAULT_STYLE,
        road_loader: Optional[RoadLayerLoader] = None,
    ) -> None:
        self.surface = surface
        self.show_roads = show_roads
        self.style = style
        width, height = self._surface_size()
        self.controller = ZoomPanController(width, height, settings)
        self.controller.subscribe(self._on_transform)
        if show_roads and road_loader is None:
            road_loader = RoadLayerLoader()
        self.road_loader = road_loader if show_roads else None
        self.routes: List[DecodedRoute] = []
        self.raw_bounds: Bounds = Bounds.empty()
        self.bounds: Optional[Bounds] = None
        self.projection: Optional[Projection] = None
        self.pending_roads: Optional[Future] = None
        self.render_count = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def transform(self) -> Transform:
        return self.controller.transform

    @property
    def has_content(self) -> bool:
        return not self.raw_bounds.is_empty

    @property
    def is_loading(self) -> bool:
        return self.road_loader is not None and self.road_loader.is_loading

    @property
    def roads(self) -> List[RoadSegment]:
        if self.road_loader is None:
            return []
        return self.road_loader.roads

    @property
    def visible_roads(self) -> List[RoadSegment]:
        return filter_by_zoom(self.roads, self.transform.k)

    def _surface_size(self) -> tuple[float, float]:
        if self.surface is None:
            return 0.0, 0.0
        return float(self.surface.width), float(self.surface.height)

    def set_polylines(self, polylines: Iterable[str]) -> List[DecodedRoute]:
        """Replace the displayed activities and redraw immediately.

        Roads for the new bounds are requested in the background; any layer
        still loading for the previous selection is ignored when it lands.
        """

        self.routes = decode_routes(polylines)
        self.raw_bounds = bounds_for_routes(self.routes)
        LOGGER.info(
            "Loaded %d routes (%d with geometry)",
            len(self.routes),
            sum(1 for route in self.routes if route.points),
        )
        self._rebuild_view()
        self._request_roads()
        self.render()
        return self.routes

    def _rebuild_view(self) -> None:
        width, height = self._surface_size()
        self.bounds = None
        self.projection = None
        if not self.has_content:
            LOGGER.info("No route content to display; drawing background only")
            return
        if width <= 0 or height <= 0:
            LOGGER.debug("Surface has no area yet; projection deferred")
            return
        settings = self.controller.settings
        self.bounds = expand(self.raw_bounds, width / height, settings.expanded_padding)
        try:
            # Routes fill the margin; the padded bounds only set the centre.
            self.projection = Projection.fit(
                self.bounds, width, height, settings.fit_margin, content=self.raw_bounds
            )
        except ValueError as exc:
            LOGGER.warning("Unable to fit projection to %sx%s surface: %s", width, height, exc)
            self.projection = None

    def _request_roads(self) -> None:
        if self.road_loader is None:
            return
        if self.bounds is None:
            self.road_loader.clear()
            self.pending_roads = None
            return
        if self.road_loader.bounds == self.bounds:
            return
        self.pending_roads = self.road_loader.request(self.bounds)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def resize(self, width: int, height: int) -> None:
        if self.surface is not None:
            self.surface.resize(width, height)
        self._rebuild_view()
        self._request_roads()
        self.controller.resize(width, height)
        self.render()

    def pointer_down(self, x: float, y: float) -> None:
        self.controller.pointer_down(x, y)

    def pointer_move(self, x: float, y: float) -> None:
        self.controller.pointer_move(x, y)

    def pointer_up(self) -> None:
        self.controller.pointer_up()

    def wheel(self, delta_y: float, x: float, y: float, delta_mode: int = 0) -> None:
        self.controller.wheel(delta_y, x, y, delta_mode)

    def pinch(self, scale_ratio: float, x: float, y: float) -> None:
        self.controller.pinch(scale_ratio, x, y)

    def double_click(self, x: float, y: float) -> bool:
        return self.controller.double_click(x, y)

    def _on_transform(self, transform: Transform) -> None:
        self.render()

    def poll(self) -> bool:
        """Apply finished road fetches; redraw when the road layer changed."""

        if self.road_loader is None:
            return False
        changed = self.road_loader.drain()
        if changed:
            self.render()
        return changed

    def wait_for_roads(self, timeout: Optional[float] = None) -> bool:
        """Block until the latest road request settles, then apply it."""

        if self.pending_roads is None:
            return False
        try:
            self.pending_roads.result(timeout=timeout)
        except FuturesTimeoutError:
            LOGGER.warning("Road network did not arrive within %ss; showing routes only", timeout)
            return False
        return self.poll()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def render(self) -> bool:
        painted = render(
            self.surface,
            self.projection,
            self.transform,
            self.routes,
            self.visible_roads if self.show_roads else [],
            show_roads=self.show_roads,
            style=self.style,
        )
        if painted:
            self.render_count += 1
        return painted

    def close(self) -> None:
        if self.road_loader is not None:
            self.road_loader.shutdown()
