import pytest

from photo_smith.errors import InvalidParameterError
from photo_smith.params import FlipDirection, FrameStyle, MergeMode, Rotation, Shade


def test_flip_direction_labels():
    assert FlipDirection.parse("Horizontal") is FlipDirection.HORIZONTAL
    assert FlipDirection.parse(" vertical ") is FlipDirection.VERTICAL
    assert FlipDirection.parse(FlipDirection.VERTICAL) is FlipDirection.VERTICAL


def test_rotation_accepts_ui_labels_and_ints():
    assert Rotation.parse("90°") is Rotation.DEG_90
    assert Rotation.parse("180 degrees") is Rotation.DEG_180
    assert Rotation.parse(270) is Rotation.DEG_270
    assert Rotation.parse(-90) is Rotation.DEG_270
    assert Rotation.DEG_90.label == "90°"


@pytest.mark.parametrize("value", ["45", "0", "sideways"])
def test_rotation_rejects_other_angles(value):
    with pytest.raises(InvalidParameterError):
        Rotation.parse(value)


def test_frame_style_by_label_or_name():
    assert FrameStyle.parse("Gold Decorated Frame") is FrameStyle.GOLD_DECORATED
    assert FrameStyle.parse("solid_red") is FrameStyle.SOLID_RED
    assert FrameStyle.parse("Solid Frame - Black") is FrameStyle.SOLID_BLACK


def test_unknown_labels_are_invalid_parameters():
    with pytest.raises(InvalidParameterError) as excinfo:
        FrameStyle.parse("Neon Frame")
    assert "Simple Frame" in str(excinfo.value)
    with pytest.raises(ValueError):
        FlipDirection.parse("Diagonal")


def test_shade_and_merge_mode():
    assert Shade.parse("DARK") is Shade.DARK
    assert MergeMode.parse("resize") is MergeMode.RESIZE
    assert MergeMode.parse("Merge common overlapping area") is MergeMode.OVERLAP
