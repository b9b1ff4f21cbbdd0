"""Tests for the fitted Web Mercator projection."""

from __future__ import annotations

import numpy as np
import pytest

from strava_heatmap.errors import EmptyBoundsError
from strava_heatmap.geometry.bounds import expand
from strava_heatmap.geometry.projection import Projection
from strava_heatmap.models import Bounds

_BOUNDS = expand(Bounds(min_lat=51.45, max_lat=51.52, min_lng=-3.25, max_lng=-3.1), 1.5, 0.2)


def test_center_maps_to_surface_center() -> None:
    projection = Projection.fit(_BOUNDS, 600, 400, margin=50)

    x, y = projection.project(*_BOUNDS.center)
    assert x == pytest.approx(300.0)
    assert y == pytest.approx(200.0)


def test_bounds_corners_stay_inside_margin() -> None:
    projection = Projection.fit(_BOUNDS, 600, 400, margin=50)
    corners = projection.project_points(
        [
            (_BOUNDS.min_lat, _BOUNDS.min_lng),
            (_BOUNDS.min_lat, _BOUNDS.max_lng),
            (_BOUNDS.max_lat, _BOUNDS.min_lng),
            (_BOUNDS.max_lat, _BOUNDS.max_lng),
        ]
    )

    assert corners.shape == (4, 2)
    assert np.all(corners[:, 0] >= 50 - 1e-6)
    assert np.all(corners[:, 0] <= 550 + 1e-6)
    assert np.all(corners[:, 1] >= 50 - 1e-6)
    assert np.all(corners[:, 1] <= 350 + 1e-6)
    # At least one dimension touches the margin exactly.
    touches_x = np.isclose(corners[:, 0].min(), 50) or np.isclose(corners[:, 0].max(), 550)
    touches_y = np.isclose(corners[:, 1].min(), 50) or np.isclose(corners[:, 1].max(), 350)
    assert touches_x or touches_y


def test_north_is_up_and_east_is_right() -> None:
    projection = Projection.fit(_BOUNDS, 600, 400, margin=50)
    south_west = projection.project(_BOUNDS.min_lat, _BOUNDS.min_lng)
    north_east = projection.project(_BOUNDS.max_lat, _BOUNDS.max_lng)

    assert north_east[0] > south_west[0]
    assert north_east[1] < south_west[1]


def test_mercator_stretches_latitude_away_from_equator() -> None:
    square = Bounds(min_lat=59.0, max_lat=61.0, min_lng=9.0, max_lng=11.0)
    projection = Projection.fit(square, 1000, 1000, margin=0)
    sw = projection.project(square.min_lat, square.min_lng)
    ne = projection.project(square.max_lat, square.max_lng)

    width = ne[0] - sw[0]
    height = sw[1] - ne[1]
    # One degree of latitude is about twice as long as one of longitude at 60N.
    assert height / width == pytest.approx(2.0, rel=0.05)


def test_empty_points_project_to_empty_array() -> None:
    projection = Projection.fit(_BOUNDS, 600, 400)

    assert projection.project_points([]).shape == (0, 2)


def test_fit_rejects_empty_bounds_and_tiny_surfaces() -> None:
    with pytest.raises(EmptyBoundsError):
        Projection.fit(Bounds.empty(), 600, 400)
    with pytest.raises(ValueError):
        Projection.fit(_BOUNDS, 80, 400, margin=50)


def test_route_content_reaches_margin_on_limiting_axis() -> None:
    raw = Bounds(min_lat=40.0, max_lat=40.02, min_lng=-3.0, max_lng=-2.96)
    expanded = expand(raw, 1200 / 800, 0.5)
    projection = Projection.fit(expanded, 1200, 800, margin=50, content=raw)

    corners = projection.project_points(
        [(raw.min_lat, raw.min_lng), (raw.max_lat, raw.max_lng)]
    )
    extent = np.abs(corners - [600.0, 400.0]).max(axis=0)
    # Half of the drawable area is 550 x 350; one axis is filled exactly.
    assert extent[0] <= 550 + 1e-6
    assert extent[1] <= 350 + 1e-6
    assert np.isclose(extent[0], 550) or np.isclose(extent[1], 350)

    x, y = projection.project(*expanded.center)
    assert x == pytest.approx(600.0)
    assert y == pytest.approx(400.0)


def test_single_point_content_scales_from_bounds() -> None:
    point = Bounds(min_lat=40.0, max_lat=40.0, min_lng=-3.0, max_lng=-3.0)
    expanded = expand(point, 1.5, 0.5)

    with_content = Projection.fit(expanded, 600, 400, margin=50, content=point)
    without = Projection.fit(expanded, 600, 400, margin=50)

    assert with_content.scale == pytest.approx(without.scale)


def test_fit_rejects_empty_content() -> None:
    with pytest.raises(EmptyBoundsError):
        Projection.fit(_BOUNDS, 600, 400, content=Bounds.empty())
