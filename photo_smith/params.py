from __future__ import annotations

from enum import Enum
from typing import Type, TypeVar, Union

from .errors import InvalidParameterError

E = TypeVar("E", bound=Enum)


class FlipDirection(Enum):
    HORIZONTAL = "Horizontal"
    VERTICAL = "Vertical"

    @classmethod
    def parse(cls, value: Union[str, "FlipDirection"]) -> "FlipDirection":
        return _parse_label(cls, value, "flip direction")


class Rotation(Enum):
    DEG_90 = 90
    DEG_180 = 180
    DEG_270 = 270

    @property
    def label(self) -> str:
        return f"{self.value}°"

    @classmethod
    def parse(cls, value: Union[str, int, "Rotation"]) -> "Rotation":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for suffix in ("°", "deg", "degrees"):
            if text.endswith(suffix):
                text = text[: -len(suffix)].strip()
        try:
            degrees = int(text)
        except ValueError:
            raise InvalidParameterError(f"Unknown rotation: {value!r}") from None
        try:
            return cls(degrees % 360)
        except ValueError:
            raise InvalidParameterError(f"Rotation must be 90, 180 or 270 degrees, got {value!r}") from None


class Shade(Enum):
    DARK = "dark"
    LIGHT = "light"

    @classmethod
    def parse(cls, value: Union[str, "Shade"]) -> "Shade":
        return _parse_label(cls, value, "dark/light choice")


class FrameStyle(Enum):
    SIMPLE = "Simple Frame"
    DOUBLE_BORDER_WHITE = "Double Border - White"
    SOLID_BLUE = "Solid Frame - Blue"
    SOLID_RED = "Solid Frame - Red"
    SOLID_GREEN = "Solid Frame - Green"
    SOLID_BLACK = "Solid Frame - Black"
    SOLID_WHITE = "Solid Frame - White"
    SHADOW = "Shadow Frame"
    GOLD_DECORATED = "Gold Decorated Frame"
    DECORATED = "Decorated Frame"

    @classmethod
    def parse(cls, value: Union[str, "FrameStyle"]) -> "FrameStyle":
        return _parse_label(cls, value, "frame style")


class MergeMode(Enum):
    OVERLAP = "Merge common overlapping area"
    RESIZE = "Resize smaller image to match larger"

    @classmethod
    def parse(cls, value: Union[str, "MergeMode"]) -> "MergeMode":
        return _parse_label(cls, value, "merge mode")


def _parse_label(enum_cls: Type[E], value: Union[str, E], what: str) -> E:
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    folded = text.casefold()
    for member in enum_cls:
        if folded in (str(member.value).casefold(), member.name.casefold()):
            return member
    choices = ", ".join(str(member.value) for member in enum_cls)
    raise InvalidParameterError(f"Unknown {what}: {text!r} (expected one of: {choices})")
