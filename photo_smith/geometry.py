from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from .errors import InvalidParameterError
from .image import Image
from .params import FlipDirection, Rotation
from .progress import CancelToken, FilterResult, ProgressSink, Scan

logger = logging.getLogger(__name__)

SKEW_BACKGROUND = (255, 255, 255)


def flip(image: Image, direction: FlipDirection | str) -> Image:
    direction = FlipDirection.parse(direction)
    if direction is FlipDirection.HORIZONTAL:
        return Image(image.pixels[:, ::-1])
    return Image(image.pixels[::-1, :])


def rotate(image: Image, angle: Rotation | int | str) -> Image:
    """
    Quarter-turn rotation.
    90 maps (x, y) to (height-1-y, x) and 270 maps (x, y) to (y, width-1-x);
    both swap the dimensions.
    """
    angle = Rotation.parse(angle)
    if angle is Rotation.DEG_90:
        return Image(np.rot90(image.pixels, k=-1))
    if angle is Rotation.DEG_180:
        return Image(image.pixels[::-1, ::-1])
    return Image(np.rot90(image.pixels, k=1))


def resize(image: Image, width: int, height: int) -> Image:
    if width < 1 or height < 1:
        raise InvalidParameterError(f"Resize dimensions must be positive, got {width}x{height}")
    if image.is_empty():
        raise InvalidParameterError("Cannot resize an empty image.")
    src_w, src_h = image.size
    xs = np.minimum((np.arange(width) * (src_w / width)).astype(np.int64), src_w - 1)
    ys = np.minimum((np.arange(height) * (src_h / height)).astype(np.int64), src_h - 1)
    logger.debug("Resize %dx%d -> %dx%d", src_w, src_h, width, height)
    return Image(image.pixels[ys[:, None], xs[None, :]])


def skew(image: Image, angle: float = 40.0) -> Image:
    """Horizontal shear; the canvas widens to fit and the background is white."""
    if not -90.0 < angle < 90.0:
        raise InvalidParameterError(f"Skew angle must be strictly between -90 and 90 degrees, got {angle}")
    tan_a = math.tan(math.radians(angle))

    min_shift = max_shift = 0
    if image.height > 0:
        top = math.floor(tan_a * 0)
        bottom = math.floor(tan_a * (image.height - 1))
        min_shift, max_shift = min(top, bottom), max(top, bottom)

    new_w = max(1, image.width + (max_shift - min_shift))
    out = Image.new(new_w, image.height, SKEW_BACKGROUND)
    for y in range(image.height):
        base = math.floor(tan_a * y) - min_shift
        start = max(0, base)
        stop = min(new_w, base + image.width)
        if start < stop:
            out.pixels[y, start:stop] = image.pixels[y, start - base:stop - base]
    return out


def crop(image: Image, left: int, top: int, width: int, height: int) -> Image:
    x0 = max(0, left)
    y0 = max(0, top)
    x1 = min(image.width, left + width)
    y1 = min(image.height, top + height)
    if x1 - x0 <= 1 or y1 - y0 <= 1:
        raise InvalidParameterError(
            f"Crop rectangle ({left}, {top}, {width}, {height}) leaves no usable area "
            f"inside a {image.width}x{image.height} image"
        )
    return Image(image.pixels[y0:y1, x0:x1])


def fish_eye(
    image: Image,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 10,
) -> FilterResult:
    out = image.copy()
    scan = Scan("Fish-Eye", image.height, token, progress, interval)
    if image.is_empty():
        return scan.result(image, out)

    width, height = image.size
    center_x = np.float32(width / 2.0)
    center_y = np.float32(height / 2.0)
    radius = min(center_x, center_y)
    columns = np.arange(width)
    dx = (columns.astype(np.float32) - center_x) / radius

    for y in scan:
        dy = (np.float32(y) - center_y) / radius
        dist = np.sqrt(dx * dx + dy * dy)
        inside = (dist > 0.0) & (dist < 1.0)
        safe = np.where(inside, dist, np.float32(1.0))
        warped = np.power(safe, np.float32(0.75))
        src_x = center_x + (dx / safe) * warped * radius
        src_y = center_y + (dy / safe) * warped * radius
        ix = np.clip(src_x.astype(np.int64), 0, width - 1)
        iy = np.clip(src_y.astype(np.int64), 0, height - 1)
        ix = np.where(inside, ix, columns)
        iy = np.where(inside, iy, y)
        out.pixels[y] = image.pixels[iy, ix]
    return scan.result(image, out)
