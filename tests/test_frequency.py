"""Tests for point recurrence counting and route intensity."""

from __future__ import annotations

import pytest

from strava_heatmap.geometry.frequency import aggregate, decode_routes, point_key
from strava_heatmap.geometry.polyline_codec import encode_polyline


def test_shared_point_raises_both_routes(shared_point_routes) -> None:
    routes = aggregate(shared_point_routes)

    assert [route.frequency for route in routes] == [2, 2]
    assert [route.intensity for route in routes] == [1.0, 1.0]
    assert routes[0].points == shared_point_routes[0]


def test_single_route_without_repeats_has_zero_intensity() -> None:
    routes = aggregate([[(40.0, -3.0), (40.001, -3.001), (40.002, -3.002)]])

    assert routes[0].frequency == 1
    assert routes[0].intensity == 0.0


@pytest.mark.parametrize("copies", [1, 2, 5])
def test_identical_routes_share_frequency(copies: int) -> None:
    points = [(51.5, -0.1), (51.501, -0.101), (51.502, -0.102)]
    routes = aggregate([list(points) for _ in range(copies)])

    assert all(route.frequency == copies for route in routes)
    expected = 0.0 if copies == 1 else 1.0
    assert all(route.intensity == expected for route in routes)


def test_repeat_within_one_route_counts_twice() -> None:
    loop = [(40.0, -3.0), (40.001, -3.0), (40.0, -3.0)]
    routes = aggregate([loop, [(41.0, -4.0), (41.001, -4.0)]])

    assert routes[0].frequency == 2
    assert routes[0].intensity == 1.0
    assert routes[1].frequency == 1
    assert routes[1].intensity == 0.0


def test_intensity_is_relative_to_global_max() -> None:
    hot = [(40.0, -3.0), (40.001, -3.001)]
    routes = aggregate([hot, hot, hot, [(40.0, -3.0), (45.0, 5.0)], [(10.0, 10.0), (10.1, 10.1)]])

    # (40.0, -3.0) appears four times; the lone route never repeats.
    assert routes[0].frequency == 4
    assert routes[3].frequency == 4
    assert routes[4].frequency == 1
    assert routes[4].intensity == 0.0
    assert routes[0].intensity == 1.0


def test_points_are_quantised_to_five_decimals() -> None:
    assert point_key(40.000001, -3.000004) == point_key(40.0, -3.0)
    routes = aggregate([[(40.000001, -3.0)], [(40.0, -3.000004)]])
    assert [route.frequency for route in routes] == [2, 2]


def test_empty_route_keeps_defaults() -> None:
    routes = aggregate([[], [(40.0, -3.0), (40.1, -3.1)]])

    assert routes[0].points == []
    assert routes[0].frequency == 1
    assert routes[0].intensity == 0.0


def test_decode_routes_skips_malformed_input(shared_point_routes) -> None:
    encoded = [encode_polyline(points) for points in shared_point_routes]
    routes = decode_routes(encoded + ["_p~iF~ps|U_ulL"])

    assert len(routes) == 3
    assert routes[2].points == []
    assert [route.frequency for route in routes[:2]] == [2, 2]
