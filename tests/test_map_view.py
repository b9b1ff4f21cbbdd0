"""End-to-end tests for the view: decode, fit, draw, zoom and road refresh."""

from __future__ import annotations

import threading
from typing import List

import pytest

from strava_heatmap.geometry.polyline_codec import encode_polyline
from strava_heatmap.map_view import HeatmapView
from strava_heatmap.models import Bounds, RoadSegment
from strava_heatmap.rendering.styles import BlendMode
from strava_heatmap.roads.loader import RoadLayerLoader

from conftest import RecordingSurface, make_road

_ROUTE_A = encode_polyline([(40.0, -3.0), (40.01, -3.01), (40.02, -3.0)])
_ROUTE_B = encode_polyline([(40.01, -3.01), (40.03, -3.02)])
_FAR_ROUTE = encode_polyline([(51.5, -0.1), (51.51, -0.12)])


class _SequencedFetcher:
    """Answers the n-th fetch with the n-th configured layer once released."""

    def __init__(self, layers: List[List[RoadSegment]]) -> None:
        self.layers = layers
        self.gates = [threading.Event() for _ in layers]
        self.requested: List[Bounds] = []
        self._lock = threading.Lock()

    def __call__(self, bounds: Bounds) -> List[RoadSegment]:
        with self._lock:
            index = len(self.requested)
            self.requested.append(bounds)
        assert self.gates[index].wait(2.0), "gate never released"
        return self.layers[index]


def _last_frame(surface: RecordingSurface):
    resets = [i for i, (name, _) in enumerate(surface.calls) if name == "reset"]
    return surface.calls[resets[-1]:]


def _frame_strokes(surface: RecordingSurface):
    return [payload[1] for name, payload in _last_frame(surface) if name == "stroke"]


@pytest.fixture
def view_factory():
    created: List[HeatmapView] = []

    def _make(fetcher=None, **kwargs) -> HeatmapView:
        # One worker keeps fetches in request order.
        loader = RoadLayerLoader(fetcher, max_workers=1) if fetcher is not None else None
        view = HeatmapView(
            RecordingSurface(400, 200),
            show_roads=fetcher is not None,
            road_loader=loader,
            **kwargs,
        )
        created.append(view)
        return view

    yield _make
    for view in created:
        view.close()


def test_empty_input_draws_background_without_fetching(view_factory) -> None:
    fetcher = _SequencedFetcher([[]])
    view = view_factory(fetcher)

    view.set_polylines([])

    assert view.projection is None
    assert not view.has_content
    assert view.pending_roads is None
    assert _last_frame(view.surface) == [("reset", view.style.background)]
    assert fetcher.requested == []


def test_routes_render_before_roads_arrive(view_factory) -> None:
    fetcher = _SequencedFetcher([[make_road(7, "motorway", start=(40.01, -3.01))]])
    view = view_factory(fetcher)

    view.set_polylines([_ROUTE_A])

    assert view.is_loading
    strokes = _frame_strokes(view.surface)
    assert len(strokes) == 1
    assert strokes[0].color == view.style.route.color

    fetcher.gates[0].set()
    assert view.wait_for_roads(timeout=2) is True

    assert not view.is_loading
    strokes = _frame_strokes(view.surface)
    assert [s.color for s in strokes] == [view.style.road.color, view.style.route.color]


def test_road_request_uses_expanded_bounds(view_factory) -> None:
    fetcher = _SequencedFetcher([[]])
    view = view_factory(fetcher)

    view.set_polylines([_ROUTE_A])
    fetcher.gates[0].set()
    view.wait_for_roads(timeout=2)

    requested = fetcher.requested[0]
    assert requested == view.bounds
    assert requested.lng_span / requested.lat_span == pytest.approx(2.0)
    assert requested.contains(40.0, -3.0)


def test_previous_selection_roads_are_ignored(view_factory) -> None:
    fetcher = _SequencedFetcher(
        [
            [make_road(1, "motorway", start=(40.01, -3.01))],
            [make_road(2, "motorway", start=(51.5, -0.1))],
        ]
    )
    view = view_factory(fetcher)

    view.set_polylines([_ROUTE_A])
    stale_future = view.pending_roads
    view.set_polylines([_FAR_ROUTE])

    fetcher.gates[0].set()
    stale_future.result(timeout=2)
    assert view.poll() is False
    assert view.roads == []
    assert view.is_loading

    fetcher.gates[1].set()
    assert view.wait_for_roads(timeout=2) is True
    assert [road.way_id for road in view.roads] == [2]


def test_failed_road_fetch_still_shows_routes(view_factory) -> None:
    def _failing(bounds: Bounds) -> List[RoadSegment]:
        raise RuntimeError("overpass unavailable")

    view = view_factory(_failing)
    view.set_polylines([_ROUTE_A, _ROUTE_B])
    view.wait_for_roads(timeout=2)

    assert not view.is_loading
    assert view.road_loader.last_failed
    strokes = _frame_strokes(view.surface)
    assert len(strokes) == 2
    assert all(s.blend_mode is BlendMode.MULTIPLY for s in strokes)


def test_malformed_polyline_is_skipped(view_factory) -> None:
    view = view_factory()

    routes = view.set_polylines(["bad", _ROUTE_A])

    assert len(routes) == 2
    assert routes[0].points == []
    assert len(_frame_strokes(view.surface)) == 1


def test_zoom_events_trigger_redraw(view_factory) -> None:
    view = view_factory()
    view.set_polylines([_ROUTE_A])
    renders = view.render_count

    view.wheel(-200, 200, 100)
    assert view.render_count == renders + 1
    assert view.surface.transform == view.transform

    view.double_click(200, 100)
    assert view.render_count == renders + 1


def test_zoom_width_follows_transform(view_factory) -> None:
    view = view_factory()
    view.set_polylines([_ROUTE_A])

    view.controller.zoom_by(4.0)

    (stroke,) = _frame_strokes(view.surface)
    assert stroke.width == pytest.approx(view.style.route.single_width / 4.0)


def test_resize_refits_projection(view_factory) -> None:
    view = view_factory()
    view.set_polylines([_ROUTE_A, _ROUTE_B])

    view.resize(800, 200)

    assert view.projection is not None
    assert view.projection.width == 800
    assert view.bounds.lng_span / view.bounds.lat_span == pytest.approx(4.0)


def test_surface_without_area_skips_render(view_factory) -> None:
    view = view_factory()
    view.resize(0, 0)
    view.set_polylines([_ROUTE_A])

    assert view.projection is None
    assert view.render() is False


def test_routes_fill_the_fit_margin(view_factory) -> None:
    view = view_factory()
    view.set_polylines([_ROUTE_A, _ROUTE_B])

    raw = view.raw_bounds
    corners = view.projection.project_points(
        [(raw.min_lat, raw.min_lng), (raw.max_lat, raw.max_lng)]
    )
    margin = view.controller.settings.fit_margin
    half_w, half_h = 200 - margin, 100 - margin
    extent = abs(corners - [200.0, 100.0]).max(axis=0)

    assert extent[0] <= half_w + 1e-6
    assert extent[1] <= half_h + 1e-6
    assert extent[0] == pytest.approx(half_w) or extent[1] == pytest.approx(half_h)
    # The padded bounds still set the centre and the road fetch box.
    assert view.projection.project(*view.bounds.center) == pytest.approx((200.0, 100.0))
