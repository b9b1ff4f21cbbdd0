"""Central configuration for the route heatmap renderer.

All values are constants imported by the rest of the package. Most can be
overridden through environment variables (optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _env_str(key: str, default: str) -> str:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Map styling
# ---------------------------------------------------------------------------
# Background fill painted before any layer.
MAP_BACKGROUND = _env_str("MAP_BACKGROUND", "#F7F2E8")

# Road network layer. Width is in surface pixels at zoom 1.
ROAD_COLOR = _env_str("ROAD_COLOR", "#1a1a1a")
ROAD_WIDTH = _env_float("ROAD_WIDTH", 0.3)
ROAD_OPACITY = _env_float("ROAD_OPACITY", 0.4)

# Route layer. A lone route is drawn wider than routes in a collection.
ROUTE_COLOR = _env_str("ROUTE_COLOR", "rgb(255, 115, 17)")
ROUTE_SINGLE_WIDTH = _env_float("ROUTE_SINGLE_WIDTH", 2.0)
ROUTE_WIDTH = _env_float("ROUTE_WIDTH", 1.0)
ROUTE_OPACITY = _env_float("ROUTE_OPACITY", 0.9)
ROUTE_BLUR = _env_float("ROUTE_BLUR", 0.99)


# ---------------------------------------------------------------------------
# Zoom / pan
# ---------------------------------------------------------------------------
ZOOM_MIN = _env_float("ZOOM_MIN", 0.6)
ZOOM_MAX = _env_float("ZOOM_MAX", 20.0)

# Panning is limited to +/- this fraction of the viewport around the content.
ZOOM_TRANSLATE_PADDING = _env_float("ZOOM_TRANSLATE_PADDING", 0.2)

# Initial view extends the route bounds by this fraction on every side.
ZOOM_EXPANDED_PADDING = _env_float("ZOOM_EXPANDED_PADDING", 0.5)

ZOOM_INITIAL = _env_float("ZOOM_INITIAL", 1.0)

# Fixed pixel margin kept free when fitting the bounds to the surface.
FIT_EXTENT_MARGIN_PX = _env_float("FIT_EXTENT_MARGIN_PX", 50.0)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------
# Decimal precision of encoded polylines (Strava/Google use 5).
POLYLINE_PRECISION = 5

# Span (degrees) substituted when every point is identical.
BOUNDS_MIN_SPAN_DEG = _env_float("BOUNDS_MIN_SPAN_DEG", 0.001)

# Grid cell (kilometres) used to split activities into regional groups.
GROUP_GRID_SIZE_KM = _env_float("GROUP_GRID_SIZE_KM", 200.0)


# ---------------------------------------------------------------------------
# Road network (Overpass API)
# ---------------------------------------------------------------------------
ROAD_NETWORK_ENABLED = _env_bool("ROAD_NETWORK_ENABLED", True)
OVERPASS_URL = _env_str("OVERPASS_URL", "https://overpass-api.de/api/interpreter")
OVERPASS_USER_AGENT = _env_str("OVERPASS_USER_AGENT", "strava-heatmap/0.1 (road network layer)")

# Server-side query timeout (seconds) embedded in the Overpass QL header.
OVERPASS_QUERY_TIMEOUT = _env_int("OVERPASS_QUERY_TIMEOUT", 25)

# Client request timeout in seconds.
REQUEST_TIMEOUT = _env_int("REQUEST_TIMEOUT", 30)

# HTTP session pool sizes.
HTTP_POOL_CONNECTIONS = 4
HTTP_POOL_MAXSIZE = 4

# Retry/backoff behaviour for transient Overpass failures.
HTTP_MAX_RETRIES = _env_int("HTTP_MAX_RETRIES", 3)
HTTP_BACKOFF_FACTOR = _env_float("HTTP_BACKOFF_FACTOR", 1.0)

# Fetched road layers are memoised per bounding box.
ROAD_CACHE_SIZE = _env_int("ROAD_CACHE_SIZE", 16)
ROAD_CACHE_TTL_SECONDS = _env_int("ROAD_CACHE_TTL_SECONDS", 3600)

# Worker threads used for background road fetches.
ROAD_FETCH_WORKERS = _env_int("ROAD_FETCH_WORKERS", 2)

# OSM highway classes requested from Overpass, most important first. The
# position in this list is the importance rank used for zoom filtering.
ROAD_CLASS_TIERS = [
    ("motorway", "motorway_link", "trunk", "trunk_link"),
    ("primary", "primary_link"),
    ("secondary", "secondary_link"),
    ("tertiary", "tertiary_link"),
    ("unclassified", "residential", "living_street"),
    ("pedestrian", "cycleway"),
    ("service", "track", "path", "footway"),
]

# (minimum zoom scale, most detailed tier shown). Sorted by zoom scale.
ROAD_ZOOM_LEVELS = [
    (0.0, 2),
    (1.0, 4),
    (2.0, 5),
    (4.0, 6),
]


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
DEFAULT_SURFACE_WIDTH = _env_int("DEFAULT_SURFACE_WIDTH", 1200)
DEFAULT_SURFACE_HEIGHT = _env_int("DEFAULT_SURFACE_HEIGHT", 800)
DEFAULT_DISPLAY_SCALE = _env_float("DEFAULT_DISPLAY_SCALE", 1.0)
OUTPUT_FILE = _env_str("OUTPUT_FILE", "heatmap.png")
