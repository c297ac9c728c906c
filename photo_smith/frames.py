from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence, Tuple

import numpy as np

from .config import GOLD_PLATE_INSET, FrameGeometry
from .errors import InvalidParameterError
from .image import Image, Rgb
from .params import FrameStyle

BLUE: Rgb = (0, 0, 255)
WHITE: Rgb = (255, 255, 255)
CHARCOAL: Rgb = (20, 20, 20)

SOLID_COLORS: Dict[FrameStyle, Rgb] = {
    FrameStyle.SOLID_BLUE: (0, 0, 255),
    FrameStyle.SOLID_RED: (255, 0, 0),
    FrameStyle.SOLID_GREEN: (0, 255, 0),
    FrameStyle.SOLID_BLACK: (0, 0, 0),
    FrameStyle.SOLID_WHITE: (255, 255, 255),
}

GOLD_OUTER: Rgb = (180, 140, 40)
GOLD_INNER: Rgb = (240, 210, 120)
GOLD_ACCENT: Rgb = (200, 160, 60)

DECORATED_OUTER: Rgb = (100, 70, 50)
DECORATED_INNER: Rgb = (235, 225, 210)
DECORATED_ACCENT: Rgb = (180, 140, 80)
DECORATED_ACCENT_BANDS = (9, 12, 15)


def add_frame(image: Image, style: FrameStyle | str, geometry: Optional[FrameGeometry] = None) -> Image:
    style = FrameStyle.parse(style)
    geometry = geometry or FrameGeometry()
    if style in SOLID_COLORS:
        return _solid(image, geometry.solid, SOLID_COLORS[style])
    builders: Dict[FrameStyle, Callable[[Image, FrameGeometry], Image]] = {
        FrameStyle.SIMPLE: _simple,
        FrameStyle.DOUBLE_BORDER_WHITE: _double_border_white,
        FrameStyle.SHADOW: _shadow,
        FrameStyle.GOLD_DECORATED: _gold_decorated,
        FrameStyle.DECORATED: _decorated,
    }
    return builders[style](image, geometry)


def add_custom_frame(image: Image, width: int, color: Sequence[int]) -> Image:
    if width < 0:
        raise InvalidParameterError(f"Frame width must not be negative, got {width}")
    values = tuple(int(v) for v in color)
    if len(values) != 3 or any(v < 0 or v > 255 for v in values):
        raise InvalidParameterError(f"Frame color must be three components in [0, 255], got {tuple(color)}")
    return _solid(image, width, (values[0], values[1], values[2]))


def _solid(image: Image, frame: int, color: Rgb) -> Image:
    canvas = Image.new(image.width + 2 * frame, image.height + 2 * frame, color)
    _paste(canvas, image, frame, frame)
    return canvas


def _simple(image: Image, geometry: FrameGeometry) -> Image:
    frame, inner, gap = geometry.simple_outer, geometry.simple_inner, geometry.simple_gap
    canvas = Image.new(image.width + 2 * frame, image.height + 2 * frame, BLUE)
    _paste(canvas, image, frame, frame)

    # White band drawn over the image, `gap` pixels in from its edge.
    ys, xs = _grid(canvas)
    x0, x1 = frame + gap, frame + image.width - gap
    y0, y1 = frame + gap, frame + image.height - gap
    inside = (xs >= x0) & (xs < x1) & (ys >= y0) & (ys < y1)
    band = (xs < x0 + inner) | (xs >= x1 - inner) | (ys < y0 + inner) | (ys >= y1 - inner)
    canvas.pixels[inside & band] = WHITE
    return canvas


def _double_border_white(image: Image, geometry: FrameGeometry) -> Image:
    outer, inner, gap = geometry.double_outer, geometry.double_inner, geometry.double_gap
    margin = outer + gap + inner
    canvas = Image.new(image.width + 2 * margin, image.height + 2 * margin, CHARCOAL)
    width, height = canvas.size
    ys, xs = _grid(canvas)

    canvas.pixels[_ring(xs, ys, width, height, 0, outer)] = WHITE
    canvas.pixels[_ring(xs, ys, width, height, outer + gap, inner)] = WHITE
    _paste(canvas, image, margin, margin)
    return canvas


def _shadow(image: Image, geometry: FrameGeometry) -> Image:
    pad, shadow = geometry.shadow_pad, geometry.shadow_size
    width = image.width + pad + shadow
    height = image.height + pad + shadow
    ys, xs = _grid_for(width, height)

    dx = np.maximum(0, xs - (pad + image.width))
    dy = np.maximum(0, ys - (pad + image.height))
    shade = np.minimum(60, np.maximum(dx, dy) * 6)
    pixels = np.broadcast_to((20 + shade)[:, :, None], (height, width, 3))
    canvas = Image(pixels.astype(np.uint8))
    _paste(canvas, image, pad, pad)
    return canvas


def _gold_decorated(image: Image, geometry: FrameGeometry) -> Image:
    frame = geometry.gold
    canvas = Image.new(image.width + 2 * frame, image.height + 2 * frame, GOLD_OUTER)
    width, height = canvas.size
    ys, xs = _grid(canvas)

    within = (xs >= 3) & (xs < width - 3) & (ys >= 3) & (ys < height - 3)
    stripe = ((xs + ys) % 11 == 0) | ((xs - ys + 1000) % 13 == 0)
    canvas.pixels[within & stripe] = GOLD_ACCENT

    plate = frame - GOLD_PLATE_INSET
    canvas.pixels[plate:height - plate, plate:width - plate] = GOLD_INNER
    _paste(canvas, image, frame, frame)
    return canvas


def _decorated(image: Image, geometry: FrameGeometry) -> Image:
    """Brown and beige frame banded by distance from the outer edge."""
    frame = geometry.decorated
    canvas = Image.new(image.width + 2 * frame, image.height + 2 * frame)
    _paste(canvas, image, frame, frame)
    width, height = canvas.size
    ys, xs = _grid(canvas)

    border = (xs < frame) | (xs >= width - frame) | (ys < frame) | (ys >= height - frame)
    dist = np.minimum(np.minimum(xs, width - 1 - xs), np.minimum(ys, height - 1 - ys))
    outer_edge = dist < 3
    accent_band = np.isin(dist, DECORATED_ACCENT_BANDS) & ~outer_edge
    plain = ~outer_edge & ~accent_band
    inner_field = plain & (dist < frame - 4)
    inner_accent = inner_field & ((xs + ys) % 12 == 0)
    rim = plain & (dist >= frame - 4) & (dist < frame - 1)

    canvas.pixels[border] = DECORATED_OUTER
    canvas.pixels[border & inner_field] = DECORATED_INNER
    canvas.pixels[border & (accent_band | inner_accent | rim)] = DECORATED_ACCENT
    return canvas


def _paste(canvas: Image, image: Image, left: int, top: int) -> None:
    canvas.pixels[top:top + image.height, left:left + image.width] = image.pixels


def _grid(canvas: Image) -> Tuple[np.ndarray, np.ndarray]:
    return _grid_for(canvas.width, canvas.height)


def _grid_for(width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    ys, xs = np.mgrid[0:height, 0:width]
    return ys, xs


def _ring(xs: np.ndarray, ys: np.ndarray, width: int, height: int, start: int, thickness: int) -> np.ndarray:
    inside = (xs >= start) & (xs < width - start) & (ys >= start) & (ys < height - start)
    edge = start + thickness
    band = (xs < edge) | (xs >= width - edge) | (ys < edge) | (ys >= height - edge)
    return inside & band
