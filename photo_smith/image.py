from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple

import numpy as np

from .errors import InvalidParameterError, OutOfBoundsError

CHANNELS = 3

Rgb = Tuple[int, int, int]


def _empty_pixels() -> np.ndarray:
    return np.zeros((0, 0, CHANNELS), dtype=np.uint8)


@dataclass(eq=False)
class Image:
    """
    Dense 8-bit RGB pixel buffer.
    pixels has shape (height, width, 3), row-major and channel-interleaved.
    Copies are deep; filters hand back new Image objects instead of sharing buffers.
    """
    pixels: np.ndarray = field(default_factory=_empty_pixels)

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise InvalidParameterError(
                f"Expected an (height, width, {CHANNELS}) array, got shape {pixels.shape}."
            )
        if pixels.dtype != np.uint8:
            pixels = np.clip(pixels, 0, 255)
        # Always a private buffer: views of another image must not alias it.
        self.pixels = np.array(pixels, dtype=np.uint8, order="C", copy=True)

    @classmethod
    def new(cls, width: int, height: int, fill: Rgb = (0, 0, 0)) -> "Image":
        if width < 0 or height < 0:
            raise InvalidParameterError(f"Image size must not be negative: {width}x{height}")
        pixels = np.empty((height, width, CHANNELS), dtype=np.uint8)
        pixels[:, :] = np.clip(np.asarray(fill, dtype=np.int64), 0, 255)
        return cls(pixels)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Iterable[int]]]) -> "Image":
        if not rows:
            return cls()
        try:
            pixels = np.array([[list(px) for px in row] for row in rows], dtype=np.int64)
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError(f"Rows must all have the same length of RGB triples: {exc}") from None
        return cls(pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        return CHANNELS

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def get(self, x: int, y: int, c: int) -> int:
        self._check(x, y, c)
        return int(self.pixels[y, x, c])

    def set(self, x: int, y: int, c: int, value: float) -> None:
        self._check(x, y, c)
        self.pixels[y, x, c] = min(max(int(value), 0), 255)

    def pixel(self, x: int, y: int) -> Rgb:
        self._check(x, y, 0)
        r, g, b = (int(v) for v in self.pixels[y, x])
        return (r, g, b)

    def put_pixel(self, x: int, y: int, rgb: Iterable[float]) -> None:
        for c, value in enumerate(rgb):
            self.set(x, y, c, value)

    def copy(self) -> "Image":
        return Image(self.pixels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))

    def __repr__(self) -> str:
        return f"Image(width={self.width}, height={self.height})"

    def _check(self, x: int, y: int, c: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height and 0 <= c < CHANNELS):
            raise OutOfBoundsError(
                f"Pixel ({x}, {y}, {c}) outside {self.width}x{self.height}x{CHANNELS} image"
            )
