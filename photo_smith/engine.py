from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from . import color, effects, frames, geometry
from .config import EngineSettings
from .errors import InvalidParameterError
from .image import Image
from .progress import CancelToken, FilterResult, FilterStatus, ProgressSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Operation:
    key: str
    label: str
    func: Callable[..., Any]
    cancelable: bool
    # parameter name -> EngineSettings attribute supplying its default
    settings_defaults: Optional[Dict[str, str]] = None


OPERATIONS: List[Operation] = [
    Operation("grayscale", "Grayscale", color.grayscale, True),
    Operation("black-and-white", "Black & White", color.black_and_white, True),
    Operation("invert", "Invert", color.invert, True),
    Operation("tv", "TV/CRT Filter", color.tv_filter, True),
    Operation("purple", "Purple Filter", color.purple, True),
    Operation("infrared", "Infrared", color.infrared, True),
    Operation("sunlight", "Enhance Sunlight", color.enhance_sunlight, True),
    Operation("tint", "Color Tint", color.color_tint, True, {"intensity": "tint_intensity"}),
    Operation("dark-light", "Dark & Light", color.dark_and_light, False, {"percent": "shade_percent"}),
    Operation("merge", "Merge", color.merge, False),
    Operation("flip", "Flip", geometry.flip, False),
    Operation("rotate", "Rotate", geometry.rotate, False),
    Operation("resize", "Resize", geometry.resize, False),
    Operation("skew", "Skew", geometry.skew, False, {"angle": "skew_angle"}),
    Operation("crop", "Crop", geometry.crop, False),
    Operation("fish-eye", "Fish-Eye", geometry.fish_eye, True),
    Operation("edges", "Edge Detection", effects.detect_edges, False),
    Operation("emboss", "Emboss", effects.emboss, True),
    Operation(
        "double-vision", "Double Vision", effects.double_vision, True, {"offset": "double_vision_offset"}
    ),
    Operation(
        "oil-painting",
        "Oil Painting",
        effects.oil_painting,
        True,
        {"radius": "oil_radius", "intensity": "oil_intensity"},
    ),
    Operation("blur", "Blur", effects.blur, True, {"strength": "blur_strength"}),
    Operation("frame", "Frame", frames.add_frame, False),
    Operation("custom-frame", "Frame", frames.add_custom_frame, False, {"width": "custom_frame_width"}),
]

CATALOG: Dict[str, Operation] = {op.key: op for op in OPERATIONS}


def get_operation(key: str) -> Operation:
    try:
        return CATALOG[key.strip().lower()]
    except KeyError:
        raise InvalidParameterError(
            f"Unknown operation: {key!r} (expected one of: {', '.join(CATALOG)})"
        ) from None


def resolve_params(op: Operation, params: Dict[str, Any], settings: Optional[EngineSettings]) -> Dict[str, Any]:
    resolved = dict(params)
    if settings is not None and op.settings_defaults:
        for name, attr in op.settings_defaults.items():
            resolved.setdefault(name, getattr(settings, attr))
    return resolved


def apply(
    key: str,
    image: Image,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressSink] = None,
    settings: Optional[EngineSettings] = None,
    **params: Any,
) -> FilterResult:
    """
    Run one catalog operation on `image` and report the outcome uniformly.
    Immediate operations always complete; cancelable ones may come back
    cancelled with `image` untouched. Invalid parameters raise.
    """
    op = get_operation(key)
    kwargs = resolve_params(op, params, settings)
    if not op.cancelable:
        logger.debug("Applying %s", op.label)
        out = op.func(image, **kwargs)
        return FilterResult(out, FilterStatus.COMPLETED, op.label, f"{op.label} filter applied")

    if settings is not None and settings.progress_interval is not None:
        kwargs.setdefault("interval", settings.progress_interval)
    result = op.func(image, token=token, progress=progress, **kwargs)
    return FilterResult(result.image, result.status, op.label, result.message)
