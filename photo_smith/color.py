from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from .errors import InvalidParameterError
from .geometry import resize
from .image import Image
from .params import MergeMode, Shade
from .progress import CancelToken, FilterResult, ProgressSink, Scan

logger = logging.getLogger(__name__)


def grayscale(
    image: Image,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 50,
) -> FilterResult:
    out = image.copy()
    scan = Scan("Grayscale", out.height, token, progress, interval)
    for y in scan:
        row = out.pixels[y].astype(np.int32)
        out.pixels[y] = (row.sum(axis=1) // 3)[:, None]
    return scan.result(image, out)


def black_and_white(
    image: Image,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 50,
) -> FilterResult:
    out = image.copy()
    scan = Scan("Black & White", out.height, token, progress, interval)
    for y in scan:
        gray = out.pixels[y].astype(np.int32).sum(axis=1) // 3
        out.pixels[y] = np.where(gray > 127, 255, 0)[:, None]
    return scan.result(image, out)


def invert(
    image: Image,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 50,
) -> FilterResult:
    out = image.copy()
    scan = Scan("Invert", out.height, token, progress, interval)
    for y in scan:
        out.pixels[y] = 255 - out.pixels[y]
    return scan.result(image, out)


def tv_filter(
    image: Image,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 20,
    rng: Optional[np.random.Generator] = None,
) -> FilterResult:
    """
    Vintage CRT look: every third row darkened to 0.7, dark pixels pushed
    towards blue, bright pixels towards orange, then uniform noise in
    [-10, 10] on each channel.

    Pass a seeded `rng` for reproducible output; by default a fresh
    generator is seeded from OS entropy on every call.
    """
    rng = rng if rng is not None else np.random.default_rng()
    out = image.copy()
    scan = Scan("TV/CRT", out.height, token, progress, interval)
    for y in scan:
        row = out.pixels[y].astype(np.int32)
        r, g, b = row[:, 0], row[:, 1], row[:, 2]
        brightness = (r + g + b).astype(np.float32) / np.float32(3.0) / np.float32(255.0)

        dark = brightness < 0.5
        r = np.where(dark, np.minimum(255, _scale32(r, 0.8)), r)
        g = np.where(dark, np.minimum(255, _scale32(g, 0.7)), g)
        b = np.where(dark, np.minimum(255, _scale32(b, 1.2)), b)

        bright = brightness > 0.7
        r = np.where(bright, np.minimum(255, _scale32(r, 1.3)), r)
        g = np.where(bright, np.minimum(255, _scale32(g, 1.1)), g)
        b = np.where(bright, np.maximum(0, _scale32(b, 0.9)), b)

        scanline = 0.7 if y % 3 == 0 else 1.0
        shaded = np.stack([_scale32(r, scanline), _scale32(g, scanline), _scale32(b, scanline)], axis=1)
        noise = rng.integers(-10, 11, size=shaded.shape)
        out.pixels[y] = np.clip(shaded + noise, 0, 255)
    return scan.result(image, out)


def purple(
    image: Image,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 50,
) -> FilterResult:
    factors = np.array([1.3, 0.5, 1.3])
    out = image.copy()
    scan = Scan("Purple", out.height, token, progress, interval)
    for y in scan:
        scaled = (out.pixels[y] * factors).astype(np.int32)
        out.pixels[y] = np.clip(scaled, 0, 255)
    return scan.result(image, out)


def infrared(
    image: Image,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 50,
) -> FilterResult:
    # Column-major: progress counts columns, not rows.
    out = image.copy()
    scan = Scan("Infrared", out.width, token, progress, interval)
    for x in scan:
        column = out.pixels[:, x].astype(np.int32)
        brightness = column.sum(axis=1).astype(np.float32) / np.float32(3.0)
        inverted = (np.float32(255.0) - brightness).astype(np.int32)
        out.pixels[:, x, 0] = 255
        out.pixels[:, x, 1] = inverted
        out.pixels[:, x, 2] = inverted
    return scan.result(image, out)


def enhance_sunlight(
    image: Image,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 20,
) -> FilterResult:
    out = image.copy()
    scan = Scan("Enhance Sunlight", out.height, token, progress, interval)
    for y in scan:
        warm = (out.pixels[y, :, :2] * 1.4).astype(np.int32)
        out.pixels[y, :, :2] = np.minimum(255, warm)
    return scan.result(image, out)


def color_tint(
    image: Image,
    color: Sequence[int],
    intensity: float = 0.5,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 50,
) -> FilterResult:
    tint = _validate_color(color)
    if not 0.0 <= intensity <= 1.0:
        raise InvalidParameterError(f"Tint intensity must be within [0, 1], got {intensity}")
    out = image.copy()
    scan = Scan("Color Tint", out.height, token, progress, interval)
    for y in scan:
        blended = out.pixels[y] * (1.0 - intensity) + tint * intensity
        out.pixels[y] = np.clip(blended.astype(np.int32), 0, 255)
    return scan.result(image, out)


def dark_and_light(image: Image, shade: Shade | str, percent: Optional[int] = None) -> Image:
    """
    Scale every channel. With a percent in [0, 100] the factor is 1 - p/100
    (dark) or 1 + p/100 (light); without one, dark divides by 3 and light
    doubles.
    """
    shade = Shade.parse(shade)
    if percent is None:
        if shade is Shade.DARK:
            scaled = image.pixels.astype(np.int32) // 3
        else:
            scaled = np.minimum(image.pixels.astype(np.int32) * 2, 255)
        return Image(scaled)

    percent = max(0, min(100, int(percent)))
    if shade is Shade.DARK:
        factor = max(0.0, 1.0 - percent / 100.0)
    else:
        factor = 1.0 + percent / 100.0
    logger.debug("Dark & Light: %s %d%% (factor %.2f)", shade.value, percent, factor)
    values = image.pixels.astype(np.float64)
    return Image(np.clip(values * factor, 0.0, 255.0).astype(np.int32))


def merge(image: Image, other: Image, mode: MergeMode | str = MergeMode.OVERLAP) -> Image:
    mode = MergeMode.parse(mode)
    if mode is MergeMode.RESIZE and image.size != other.size:
        target_w = max(image.width, other.width)
        target_h = max(image.height, other.height)
        if image.size != (target_w, target_h):
            image = resize(image, target_w, target_h)
        if other.size != (target_w, target_h):
            other = resize(other, target_w, target_h)

    width = min(image.width, other.width)
    height = min(image.height, other.height)
    a = image.pixels[:height, :width].astype(np.int32)
    b = other.pixels[:height, :width].astype(np.int32)
    return Image((a + b) // 2)


def _scale32(channel: np.ndarray, factor: float) -> np.ndarray:
    return (channel.astype(np.float32) * np.float32(factor)).astype(np.int32)


def _validate_color(color: Sequence[int]) -> np.ndarray:
    values = [int(v) for v in color]
    if len(values) != 3 or any(v < 0 or v > 255 for v in values):
        raise InvalidParameterError(f"Color must be three components in [0, 255], got {tuple(color)}")
    return np.array(values, dtype=np.float64)
