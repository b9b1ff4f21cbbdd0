"""Interactive HTML preview of the heatmap built with folium."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

import folium

from ..errors import EmptyBoundsError
from ..geometry.bounds import bounds_for_routes
from ..models import DecodedRoute, RoadSegment
from .styles import DEFAULT_STYLE, MapStyle

PathLike = Union[str, Path]

# Leaflet stroke weights are whole pixels; scale the raster widths up.
_WEIGHT_SCALE = 2.0


def create_heatmap_html(
    routes: Sequence[DecodedRoute],
    roads: Iterable[RoadSegment] = (),
    *,
    style: MapStyle = DEFAULT_STYLE,
    output_html_path: Optional[PathLike] = None,
) -> folium.Map:
    """Create an interactive map with the road layer under every route.

    Routes share one translucent colour so overlapping trips read darker,
    matching the raster output.

    Raises:
        EmptyBoundsError: If no route has any points.
    """

    bounds = bounds_for_routes(routes)
    if bounds.is_empty:
        raise EmptyBoundsError("No route points to show on the HTML map")

    folium_map = folium.Map(
        location=bounds.center,
        zoom_start=13,
        control_scale=True,
        tiles=None,
    )
    road_layer = folium.FeatureGroup(name="Roads")
    for road in roads:
        folium.PolyLine(
            road.points,
            color=style.road.color,
            weight=1,
            opacity=style.road.opacity,
            tooltip=road.road_class or None,
        ).add_to(road_layer)
    road_layer.add_to(folium_map)

    single = len(routes) == 1
    width = style.route.single_width if single else style.route.width
    route_layer = folium.FeatureGroup(name="Routes")
    for index, route in enumerate(routes):
        if len(route.points) < 2:
            continue
        folium.PolyLine(
            route.points,
            color=style.route.color,
            weight=max(1.0, width * _WEIGHT_SCALE),
            opacity=style.route.opacity if single else style.route.opacity / 2.0,
            tooltip=f"Route {index + 1} (seen {route.frequency}x)",
        ).add_to(route_layer)
    route_layer.add_to(folium_map)

    folium.LayerControl().add_to(folium_map)
    folium_map.fit_bounds(
        [[bounds.min_lat, bounds.min_lng], [bounds.max_lat, bounds.max_lng]]
    )

    if output_html_path is not None:
        output_path = Path(output_html_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        folium_map.save(str(output_path))

    return folium_map


__all__ = ["create_heatmap_html"]
