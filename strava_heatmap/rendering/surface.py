"""Drawing surface contract and a Pillow raster implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageChops, ImageColor, ImageDraw, ImageFilter

from ..config import DEFAULT_DISPLAY_SCALE
from ..models import IDENTITY, Transform
from .styles import BlendMode, StrokeStyle

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]
PixelPath = NDArray[np.float64]


class DrawingSurface(ABC):
    """Resizable 2-D raster target.

    ``width`` and ``height`` are logical pixels; the backing store is
    ``display_scale`` times larger so strokes stay crisp on dense displays.
    """

    def __init__(self, width: int, height: int, display_scale: float = DEFAULT_DISPLAY_SCALE) -> None:
        if display_scale <= 0:
            raise ValueError("display_scale must be greater than zero")
        self._width = int(width)
        self._height = int(height)
        self._display_scale = float(display_scale)
        self._transform = IDENTITY

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def display_scale(self) -> float:
        return self._display_scale

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def is_available(self) -> bool:
        """False while the surface has no drawable area."""

        return self._width > 0 and self._height > 0

    def resize(self, width: int, height: int) -> None:
        self._width = int(width)
        self._height = int(height)

    def set_transform(self, transform: Transform) -> None:
        """Apply translate-then-scale to every following stroke."""

        self._transform = transform

    @abstractmethod
    def reset(self, background: str) -> None:
        """Reallocate the backing store and fill it with ``background``."""

    @abstractmethod
    def stroke_paths(self, paths: Sequence[PixelPath], style: StrokeStyle) -> None:
        """Stroke every path (``(N, 2)`` arrays in user units) as one layer."""


def _parse_color(color: str) -> Tuple[int, int, int]:
    rgb = ImageColor.getrgb(color)
    return rgb[0], rgb[1], rgb[2]


class PillowSurface(DrawingSurface):
    """Pillow-backed surface; the result can be saved as a PNG."""

    def __init__(self, width: int, height: int, display_scale: float = DEFAULT_DISPLAY_SCALE) -> None:
        super().__init__(width, height, display_scale)
        self._image = Image.new("RGB", self.device_size, "white")

    @property
    def device_size(self) -> Tuple[int, int]:
        return (
            max(1, int(round(self._width * self._display_scale))),
            max(1, int(round(self._height * self._display_scale))),
        )

    @property
    def image(self) -> Image.Image:
        return self._image

    def reset(self, background: str) -> None:
        self._image = Image.new("RGB", self.device_size, _parse_color(background))
        self._transform = IDENTITY

    def _to_device(self, path: PixelPath) -> list[Tuple[float, float]]:
        t = self._transform
        scale = self._display_scale
        xs = (path[:, 0] * t.k + t.x) * scale
        ys = (path[:, 1] * t.k + t.y) * scale
        return list(zip(xs.tolist(), ys.tolist()))

    def stroke_paths(self, paths: Sequence[PixelPath], style: StrokeStyle) -> None:
        drawable = [path for path in paths if len(path) >= 2]
        if not drawable or style.opacity <= 0:
            return

        device_width = style.width * self._transform.k * self._display_scale
        line_width = max(1, int(round(device_width)))
        # Hairlines thinner than a device pixel are drawn 1px wide but fainter.
        coverage = min(1.0, device_width) if device_width > 0 else 0.0
        alpha = max(0.0, min(1.0, style.opacity * coverage))

        mask = Image.new("L", self._image.size, 0)
        draw = ImageDraw.Draw(mask)
        for path in drawable:
            draw.line(self._to_device(path), fill=255, width=line_width, joint="curve")
        if style.blur_radius > 0:
            mask = mask.filter(ImageFilter.GaussianBlur(style.blur_radius * self._display_scale))
        if alpha < 1.0:
            mask = mask.point(lambda value: int(round(value * alpha)))

        paint = Image.new("RGB", self._image.size, _parse_color(style.color))
        if style.blend_mode is BlendMode.MULTIPLY:
            paint = ImageChops.multiply(self._image, paint)
        self._image = Image.composite(paint, self._image, mask)

    def save(self, path: PathLike) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        self._image.save(target, "PNG")
        LOGGER.info("Saved map image to %s", target)
        return target
