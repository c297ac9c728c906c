import numpy as np
import pytest
from PIL import Image as PILImage

from photo_smith.cli import convert_params, main, parse_color, parse_geometry, parse_size, parse_step
from photo_smith.errors import InvalidParameterError


def _write(path, size=(6, 4), color=(10, 20, 30)):
    PILImage.new("RGB", size, color).save(path)
    return str(path)


def _read(path):
    with PILImage.open(path) as img:
        return np.array(img.convert("RGB"))


def test_parse_size():
    assert parse_size("640x480") == (640, 480)
    with pytest.raises(InvalidParameterError):
        parse_size("640")


def test_parse_geometry():
    assert parse_geometry("100x80+10+20") == (100, 80, 10, 20)
    with pytest.raises(ValueError):
        parse_geometry("100x80")


def test_parse_color():
    assert parse_color("#ff8800") == (255, 136, 0)
    assert parse_color("1/2/3") == (1, 2, 3)
    with pytest.raises(InvalidParameterError):
        parse_color("red")


def test_parse_step():
    assert parse_step("grayscale") == ("grayscale", {})
    assert parse_step("blur:strength=40") == ("blur", {"strength": "40"})
    assert parse_step("double-vision: offset = 3 ") == ("double-vision", {"offset": "3"})
    with pytest.raises(InvalidParameterError):
        parse_step("blur:40")


def test_convert_params():
    assert convert_params({"size": "4x3"}) == {"width": 4, "height": 3}
    assert convert_params({"rect": "4x3+1+2"}) == {"left": 1, "top": 2, "width": 4, "height": 3}
    assert convert_params({"intensity": "0.25", "color": "#000000"}) == {"intensity": 0.25, "color": (0, 0, 0)}
    assert convert_params({"direction": "Vertical", "angle": "90"}) == {"direction": "Vertical", "angle": 90}


def test_list_operations(capsys):
    assert main(["--list"]) == 0
    out = capsys.readouterr().out
    assert "oil-painting" in out
    assert "cancelable" in out


def test_apply_chain_and_save(tmp_path):
    src = _write(tmp_path / "in.png")
    dst = tmp_path / "out.png"
    code = main([src, "-o", str(dst), "--apply", "invert", "--apply", "resize:size=3x2"])
    assert code == 0
    pixels = _read(dst)
    assert pixels.shape == (2, 3, 3)
    assert pixels[0, 0].tolist() == [245, 235, 225]


def test_crop_and_frame_steps(tmp_path):
    src = _write(tmp_path / "in.png", size=(10, 10))
    dst = tmp_path / "out.bmp"
    code = main([src, "-o", str(dst), "-a", "crop:rect=4x4+1+1", "-a", "custom-frame:width=2,color=255/0/0"])
    assert code == 0
    pixels = _read(dst)
    assert pixels.shape == (8, 8, 3)
    assert pixels[0, 0].tolist() == [255, 0, 0]
    assert pixels[2, 2].tolist() == [10, 20, 30]


def test_merge_step(tmp_path):
    src = _write(tmp_path / "in.png", size=(4, 4), color=(100, 100, 100))
    other = _write(tmp_path / "other.png", size=(2, 2), color=(0, 0, 0))
    dst = tmp_path / "out.png"
    assert main([src, "-o", str(dst), "-a", f"merge:with={other}"]) == 0
    assert _read(dst).shape == (2, 2, 3)


def test_tv_seed_is_reproducible(tmp_path):
    src = _write(tmp_path / "in.png")
    first, second = tmp_path / "a.png", tmp_path / "b.png"
    assert main([src, "-o", str(first), "-a", "tv", "--seed", "3"]) == 0
    assert main([src, "-o", str(second), "-a", "tv", "--seed", "3"]) == 0
    assert np.array_equal(_read(first), _read(second))


def test_failures_return_non_zero(tmp_path):
    src = _write(tmp_path / "in.png")
    dst = tmp_path / "out.png"
    assert main([src, "-o", str(dst), "-a", "sharpen"]) == 1
    assert main([src, "-o", str(dst), "-a", "blur:40"]) == 1
    assert main([str(tmp_path / "missing.png"), "-o", str(dst)]) == 1
    assert main([]) == 1
    assert not dst.exists()
