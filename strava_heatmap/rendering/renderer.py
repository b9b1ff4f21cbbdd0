"""Full-surface redraw of the road and route layers."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..geometry.projection import Projection
from ..models import DecodedRoute, RoadSegment, Transform
from .styles import DEFAULT_STYLE, MapStyle
from .surface import DrawingSurface

LOGGER = logging.getLogger(__name__)


def render(
    surface: Optional[DrawingSurface],
    projection: Optional[Projection],
    transform: Transform,
    routes: Sequence[DecodedRoute],
    filtered_roads: Sequence[RoadSegment],
    *,
    is_single_route: Optional[bool] = None,
    show_roads: bool = True,
    style: MapStyle = DEFAULT_STYLE,
) -> bool:
    """Redraw the whole surface: background, then roads, then routes.

    Args:
        surface: Target surface; ``None`` or a surface without area makes the
            call a no-op so the caller can retry on the next layout pass.
        projection: Geo to pixel mapping. ``None`` means there is no content
            and only the background is painted.
        transform: Current pan/zoom state.
        routes: Routes drawn on top, each as its own stroke.
        filtered_roads: Roads already filtered for ``transform.k``.
        is_single_route: Overrides the single-route width/blend choice;
            defaults to ``len(routes) == 1``.
        show_roads: Draw the road layer when road data is present.
        style: Colours and line widths.

    Returns:
        True when the surface was painted.
    """

    if surface is None or not surface.is_available:
        LOGGER.debug("Render skipped: drawing surface unavailable")
        return False

    surface.reset(style.background)
    if projection is None:
        return True

    surface.set_transform(transform)
    k = transform.k

    if show_roads and filtered_roads:
        road_paths = [projection.project_points(road.points) for road in filtered_roads]
        surface.stroke_paths(road_paths, style.road_stroke(k))

    single = len(routes) == 1 if is_single_route is None else is_single_route
    route_stroke = style.route_stroke(k, single)
    for route in routes:
        if not route.points:
            continue
        surface.stroke_paths([projection.project_points(route.points)], route_stroke)
    return True
