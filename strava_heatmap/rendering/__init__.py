"""Surface abstraction, layer styles and the full-surface renderer."""

from .html_export import create_heatmap_html
from .renderer import render
from .styles import DEFAULT_STYLE, BlendMode, MapStyle, RoadStyle, RouteStyle, StrokeStyle
from .surface import DrawingSurface, PillowSurface

__all__ = [
    "BlendMode",
    "create_heatmap_html",
    "DEFAULT_STYLE",
    "DrawingSurface",
    "MapStyle",
    "PillowSurface",
    "render",
    "RoadStyle",
    "RouteStyle",
    "StrokeStyle",
]
