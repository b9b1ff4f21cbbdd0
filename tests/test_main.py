"""Tests for the command line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from PIL import Image

from strava_heatmap.geometry.polyline_codec import encode_polyline
from strava_heatmap.main import load_polylines, main

_ROUTE = encode_polyline([(40.0, -3.0), (40.01, -3.01)])
_OTHER = encode_polyline([(40.01, -3.01), (40.02, -3.0)])


def test_load_polylines_from_activity_json(tmp_path: Path) -> None:
    source = tmp_path / "activities.json"
    source.write_text(
        json.dumps(
            {
                "activities": [
                    {"id": 1, "map": {"summary_polyline": _ROUTE}},
                    {"id": 2, "map": {"summary_polyline": None}},
                    {"id": 3},
                    _OTHER,
                ]
            }
        ),
        encoding="utf-8",
    )

    assert load_polylines(source) == [_ROUTE, _OTHER]


def test_load_polylines_from_text(tmp_path: Path) -> None:
    source = tmp_path / "routes.txt"
    source.write_text(f"{_ROUTE}\n\n  {_OTHER}  \n", encoding="utf-8")

    assert load_polylines(source) == [_ROUTE, _OTHER]


def test_load_polylines_rejects_unexpected_json(tmp_path: Path) -> None:
    source = tmp_path / "bad.json"
    source.write_text('"just a string"', encoding="utf-8")

    with pytest.raises(ValueError):
        load_polylines(source)


def test_cli_writes_png_and_html(tmp_path: Path) -> None:
    source = tmp_path / "routes.txt"
    source.write_text(f"{_ROUTE}\n{_OTHER}\n", encoding="utf-8")
    output = tmp_path / "out" / "heatmap.png"
    html = tmp_path / "out" / "heatmap.html"

    code = main(
        [
            str(source),
            "--output",
            str(output),
            "--html",
            str(html),
            "--width",
            "200",
            "--height",
            "150",
            "--scale",
            "2",
            "--zoom",
            "1.5",
            "--no-roads",
        ]
    )

    assert code == 0
    with Image.open(output) as image:
        assert image.size == (400, 300)
    assert html.exists()


def test_cli_with_no_routes_writes_background(tmp_path: Path) -> None:
    source = tmp_path / "empty.json"
    source.write_text("[]", encoding="utf-8")
    output = tmp_path / "blank.png"

    code = main([str(source), "--output", str(output), "--width", "10", "--height", "10", "--no-roads"])

    assert code == 0
    assert output.exists()


def test_cli_missing_input_returns_error(tmp_path: Path) -> None:
    assert main([str(tmp_path / "missing.json"), "--no-roads"]) == 1
