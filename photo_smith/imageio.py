from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from .errors import ImageIOError
from .image import Image

logger = logging.getLogger(__name__)

LOAD_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".tga"}
SAVE_FORMATS = {".png": "PNG", ".jpg": "JPEG", ".jpeg": "JPEG", ".bmp": "BMP"}

PathLike = Union[str, Path]


@dataclass
class LoadedImage:
    image: Image
    path: str
    # Carried over to the next save: dpi and icc_profile when the file had them.
    save_kwargs: dict = field(default_factory=dict)


def is_supported_image(path: PathLike) -> bool:
    return Path(path).suffix.lower() in LOAD_EXTENSIONS


def load_image(path: PathLike) -> LoadedImage:
    """Decode a PNG/JPEG/BMP/TGA file into an RGB buffer; alpha is dropped."""
    path = Path(path)
    if not is_supported_image(path):
        raise ImageIOError(f"Unsupported image format: {path.suffix or path.name}")
    try:
        with PILImage.open(path) as source:
            save_kwargs = _extract_save_kwargs(source)
            pixels = np.array(source.convert("RGB"), dtype=np.uint8)
    except FileNotFoundError:
        raise ImageIOError(f"Image not found: {path}") from None
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageIOError(f"Could not read image {path}: {exc}") from exc
    image = Image(pixels)
    logger.info("Loaded %s (%dx%d)", path, image.width, image.height)
    return LoadedImage(image=image, path=str(path), save_kwargs=save_kwargs)


def save_image(image: Image, path: PathLike, save_kwargs: Optional[dict] = None) -> None:
    path = Path(path)
    fmt = SAVE_FORMATS.get(path.suffix.lower())
    if fmt is None:
        raise ImageIOError(f"Unsupported save format: {path.suffix or path.name} (use PNG, JPEG or BMP)")
    if image.is_empty():
        raise ImageIOError("No image to save.")
    kwargs = dict(save_kwargs or {})
    if fmt == "BMP":
        kwargs.pop("icc_profile", None)
    try:
        PILImage.fromarray(image.pixels).save(path, format=fmt, **kwargs)
    except (OSError, ValueError) as exc:
        raise ImageIOError(f"Could not save image to {path}: {exc}") from exc
    logger.info("Saved %s (%dx%d)", path, image.width, image.height)


def _extract_save_kwargs(source: PILImage.Image) -> dict:
    info = getattr(source, "info", {}) or {}
    save_kwargs: dict = {}
    dpi = info.get("dpi")
    if dpi:
        save_kwargs["dpi"] = dpi
    icc_profile = info.get("icc_profile")
    if icc_profile:
        save_kwargs["icc_profile"] = icc_profile
    return save_kwargs
