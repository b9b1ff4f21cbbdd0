"""Input handling for the interactive map view."""

from .zoom_pan import ZoomPanController, ZoomSettings

__all__ = ["ZoomPanController", "ZoomSettings"]
