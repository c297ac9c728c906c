from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np

from .image import Image
from .progress import CancelToken, FilterResult, ProgressSink, Scan

logger = logging.getLogger(__name__)

GAUSSIAN_5X5 = np.array(
    [
        [1, 4, 6, 4, 1],
        [4, 16, 24, 16, 4],
        [6, 24, 36, 24, 6],
        [4, 16, 24, 16, 4],
        [1, 4, 6, 4, 1],
    ],
    dtype=np.int64,
)
GAUSSIAN_SUM = 256

SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.int64)
SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.int64)

EDGE_THRESHOLD = 50


def detect_edges(image: Image) -> Image:
    """
    Sobel edge map: black edges on white.

    Luma grayscale, 5x5 Gaussian on pixels at least two away from the border,
    3x3 Sobel on pixels at least one away, magnitude above 50 marks an edge.
    The one-pixel border is never written and stays black.
    """
    height, width = image.height, image.width
    rgb = image.pixels.astype(np.float64)
    gray = (0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]).astype(np.int64)

    blurred = np.zeros((height, width), dtype=np.int64)
    if height > 4 and width > 4:
        blurred[2:-2, 2:-2] = _correlate(gray, GAUSSIAN_5X5) // GAUSSIAN_SUM

    edges = np.zeros((height, width, 3), dtype=np.uint8)
    if height > 2 and width > 2:
        gx = _correlate(blurred, SOBEL_X)
        gy = _correlate(blurred, SOBEL_Y)
        magnitude = np.minimum(np.sqrt(gx * gx + gy * gy).astype(np.int64), 255)
        edges[1:-1, 1:-1] = np.where(magnitude > EDGE_THRESHOLD, 0, 255)[:, :, None]
    return Image(edges)


def emboss(
    image: Image,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 20,
) -> FilterResult:
    # The last row and column have no lower-right neighbour and stay zero.
    out = Image.new(image.width, image.height)
    source = image.pixels.astype(np.int32)
    scan = Scan("Emboss", max(0, image.height - 1), token, progress, interval)
    for y in scan:
        diff = np.clip(source[y, :-1] - source[y + 1, 1:] + 128, 0, 255)
        out.pixels[y, :-1] = (diff.sum(axis=1) // 3)[:, None]
    return scan.result(image, out)


def double_vision(
    image: Image,
    offset: int = 15,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 20,
) -> FilterResult:
    offset = max(0, int(offset))
    out = Image.new(image.width, image.height)
    source = image.pixels.astype(np.float64)
    shifted_x = np.minimum(np.arange(image.width) + offset, image.width - 1)
    scan = Scan("Double Vision", image.height, token, progress, interval)
    for y in scan:
        first = source[y]
        second = source[y, shifted_x]
        blend = (first * 0.6 + second * 0.4).astype(np.int32)
        blend[:, 0] = np.minimum(255, blend[:, 0] + 25)
        out.pixels[y] = blend
    return scan.result(image, out)


def oil_painting(
    image: Image,
    radius: int = 3,
    intensity: int = 30,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 5,
) -> FilterResult:
    """
    Mode filter over a (2*radius+1)^2 window.

    Each neighbour is bucketed by avg(R, G, B) // intensity; the output pixel is
    the mean colour of the most populated bucket, the lowest bucket winning ties.
    """
    radius = max(1, int(radius))
    intensity = max(1, min(255, int(intensity)))
    height, width = image.height, image.width
    out = Image.new(width, height)
    source = image.pixels.astype(np.int64)
    levels = np.clip(source.sum(axis=2) // 3 // intensity, 0, 255)
    n_levels = 255 // intensity + 1
    columns = np.arange(width)

    scan = Scan("Oil Painting", height, token, progress, interval)
    for y in scan:
        y0, y1 = max(0, y - radius), min(height, y + radius + 1)
        band_levels = levels[y0:y1]
        band_rgb = source[y0:y1]
        bins = (band_levels * width + columns[None, :]).ravel()

        column_counts = np.bincount(bins, minlength=n_levels * width).reshape(n_levels, width)
        column_sums = np.stack(
            [
                np.bincount(bins, weights=band_rgb[:, :, c].ravel(), minlength=n_levels * width)
                .reshape(n_levels, width)
                .astype(np.int64)
                for c in range(3)
            ],
            axis=2,
        )

        counts, _ = _window_sums(column_counts.T, radius)
        sums, _ = _window_sums(column_sums.transpose(1, 0, 2), radius)
        best = np.argmax(counts, axis=1)
        best_counts = np.maximum(1, counts[columns, best])
        out.pixels[y] = sums[columns, best] // best_counts[:, None]
    return scan.result(image, out)


def blur_radius(strength: int) -> int:
    strength = max(0, min(100, int(strength)))
    return max(1, strength * 24 // 100 + 1)


def blur(
    image: Image,
    strength: int = 60,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    interval: int = 10,
) -> FilterResult:
    """Box blur; strength 0-100 maps to a window radius of 1-25."""
    radius = blur_radius(strength)
    height = image.height
    out = Image.new(image.width, height)
    source = image.pixels.astype(np.int64)
    logger.debug("Blur strength %s -> radius %d", strength, radius)

    scan = Scan("Blur", height, token, progress, interval)
    for y in scan:
        y0, y1 = max(0, y - radius), min(height, y + radius + 1)
        column_sums = source[y0:y1].sum(axis=0)
        sums, spans = _window_sums(column_sums, radius)
        counts = np.maximum(1, spans * (y1 - y0))
        out.pixels[y] = sums // counts[:, None]
    return scan.result(image, out)


def _correlate(plane: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Valid-mode correlation by summing shifted slices."""
    k_h, k_w = kernel.shape
    out_h = plane.shape[0] - k_h + 1
    out_w = plane.shape[1] - k_w + 1
    acc = np.zeros((out_h, out_w), dtype=np.int64)
    for ky in range(k_h):
        for kx in range(k_w):
            weight = kernel[ky, kx]
            if weight:
                acc += weight * plane[ky:ky + out_h, kx:kx + out_w]
    return acc


def _window_sums(values: np.ndarray, radius: int) -> Tuple[np.ndarray, np.ndarray]:
    """Sums over [i - radius, i + radius] along axis 0, clipped to the array."""
    n = values.shape[0]
    zero = np.zeros((1,) + values.shape[1:], dtype=np.int64)
    running = np.concatenate([zero, np.cumsum(values, axis=0, dtype=np.int64)])
    index = np.arange(n)
    lo = np.maximum(index - radius, 0)
    hi = np.minimum(index + radius + 1, n)
    return running[hi] - running[lo], hi - lo
