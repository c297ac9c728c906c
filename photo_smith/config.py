from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional

from .errors import InvalidParameterError

# The gold frame paints its inner plate 6 pixels inside the outer edge.
GOLD_PLATE_INSET = 6


@dataclass
class EngineSettings:
    history_capacity: int = 20
    # None keeps each filter's own reporting interval.
    progress_interval: Optional[int] = None
    blur_strength: int = 60
    oil_radius: int = 3
    oil_intensity: int = 30
    double_vision_offset: int = 15
    skew_angle: float = 40.0
    shade_percent: int = 50
    tint_intensity: float = 0.5
    custom_frame_width: int = 20


@dataclass
class FrameGeometry:
    simple_outer: int = 10
    simple_inner: int = 5
    simple_gap: int = 5
    double_outer: int = 14
    double_inner: int = 6
    double_gap: int = 4
    solid: int = 20
    shadow_pad: int = 15
    shadow_size: int = 18
    gold: int = 45
    decorated: int = 25

    def __post_init__(self) -> None:
        for item in fields(self):
            if getattr(self, item.name) < 0:
                raise InvalidParameterError(f"Frame size {item.name} must not be negative")
        if self.gold < GOLD_PLATE_INSET:
            raise InvalidParameterError(
                f"Gold frame width must be at least {GOLD_PLATE_INSET}, got {self.gold}"
            )
