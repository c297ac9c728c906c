from __future__ import annotations


class PhotoSmithError(Exception):
    """Base class for every failure raised by photo_smith."""


class InvalidParameterError(PhotoSmithError, ValueError):
    """A selector or numeric parameter is outside what the operation accepts.

    Raised before any pixel is touched, so the caller's image is left as it was.
    """


class OutOfBoundsError(PhotoSmithError, IndexError):
    """A pixel coordinate or channel index fell outside the buffer."""


class ImageIOError(PhotoSmithError, OSError):
    """Loading or saving an image file failed."""
