import numpy as np
import pytest

from photo_smith.color import (
    black_and_white,
    color_tint,
    dark_and_light,
    enhance_sunlight,
    grayscale,
    infrared,
    invert,
    merge,
    purple,
    tv_filter,
)
from photo_smith.errors import InvalidParameterError
from photo_smith.image import Image
from photo_smith.params import MergeMode, Shade
from photo_smith.progress import CancelToken


class ZeroNoise:
    def integers(self, low, high, size):
        return np.zeros(size, dtype=np.int64)


def test_invert_white_to_black_and_back():
    white = Image.new(4, 4, (255, 255, 255))
    black = invert(white).image
    assert black == Image.new(4, 4, (0, 0, 0))
    assert invert(black).image == white


def test_invert_is_an_involution(gradient):
    assert invert(invert(gradient).image).image == gradient


def test_filters_do_not_touch_their_input(gradient):
    before = gradient.copy()
    invert(gradient)
    grayscale(gradient)
    purple(gradient)
    assert gradient == before


def test_grayscale_averages_channels():
    img = Image.new(1, 1, (10, 20, 33))
    assert grayscale(img).image.pixel(0, 0) == (21, 21, 21)


def test_grayscale_is_idempotent(gradient):
    once = grayscale(gradient).image
    assert grayscale(once).image == once


def test_black_and_white_threshold():
    img = Image.from_rows([[(128, 128, 128), (127, 127, 127)]])
    out = black_and_white(img).image
    assert out.pixel(0, 0) == (255, 255, 255)
    assert out.pixel(1, 0) == (0, 0, 0)


def test_purple_scales_and_clips():
    img = Image.from_rows([[(100, 100, 100), (200, 200, 200)]])
    out = purple(img).image
    assert out.pixel(0, 0) == (130, 50, 130)
    assert out.pixel(1, 0) == (255, 100, 255)


def test_infrared_inverts_brightness_into_green_and_blue():
    img = Image.new(3, 2, (30, 60, 90))
    out = infrared(img).image
    assert out.pixel(2, 1) == (255, 195, 195)


def test_infrared_reports_progress_per_column():
    calls = []
    infrared(Image.new(3, 7), progress=lambda done, total: calls.append((done, total)), interval=1)
    assert calls == [(1, 3), (2, 3), (3, 3)]


def test_enhance_sunlight_warms_red_and_green():
    img = Image.new(1, 1, (101, 200, 50))
    assert enhance_sunlight(img).image.pixel(0, 0) == (141, 255, 50)


def test_tv_filter_scanlines_and_tones_without_noise():
    white = Image.new(2, 2, (255, 255, 255))
    out = tv_filter(white, rng=ZeroNoise()).image
    assert out.pixel(0, 0) == (178, 178, 160)
    assert out.pixel(1, 1) == (255, 255, 229)


def test_tv_filter_is_reproducible_with_a_seed(gradient):
    first = tv_filter(gradient, rng=np.random.default_rng(7)).image
    second = tv_filter(gradient, rng=np.random.default_rng(7)).image
    assert first == second
    assert first.size == gradient.size


def test_tv_filter_cancelled_returns_source(gradient):
    token = CancelToken()
    token.cancel()
    result = tv_filter(gradient, token=token)
    assert result.cancelled
    assert result.image is gradient


def test_color_tint_blends_towards_color():
    white = Image.new(2, 1, (255, 255, 255))
    out = color_tint(white, (0, 0, 0), 0.5).image
    assert out.pixel(0, 0) == (127, 127, 127)
    assert color_tint(white, (10, 20, 30), 1.0).image.pixel(1, 0) == (10, 20, 30)


def test_color_tint_validates_inputs():
    img = Image.new(1, 1)
    with pytest.raises(InvalidParameterError):
        color_tint(img, (0, 0, 0), 1.5)
    with pytest.raises(InvalidParameterError):
        color_tint(img, (300, 0, 0), 0.5)
    with pytest.raises(InvalidParameterError):
        color_tint(img, (1, 2), 0.5)


def test_dark_and_light_without_percent():
    img = Image.from_rows([[(90, 90, 90), (200, 200, 200)]])
    assert dark_and_light(img, Shade.DARK).pixel(0, 0) == (30, 30, 30)
    light = dark_and_light(img, "light")
    assert light.pixel(0, 0) == (180, 180, 180)
    assert light.pixel(1, 0) == (255, 255, 255)


def test_dark_and_light_with_percent():
    img = Image.new(1, 1, (100, 100, 100))
    assert dark_and_light(img, Shade.DARK, 50).pixel(0, 0) == (50, 50, 50)
    assert dark_and_light(img, Shade.LIGHT, 50).pixel(0, 0) == (150, 150, 150)
    assert dark_and_light(img, Shade.DARK, 150).pixel(0, 0) == (0, 0, 0)


def test_dark_and_light_rejects_unknown_choice():
    with pytest.raises(InvalidParameterError):
        dark_and_light(Image.new(1, 1), "dim")


def test_merge_keeps_the_common_area():
    a = Image.new(4, 3, (10, 20, 30))
    b = Image.new(2, 5, (21, 40, 61))
    out = merge(a, b)
    assert out.size == (2, 3)
    assert out.pixel(1, 2) == (15, 30, 45)


def test_merge_averages_every_pixel(make_gradient):
    a = make_gradient(6, 4)
    b = invert(make_gradient(5, 5)).image
    out = merge(a, b)
    expected = (a.pixels[:4, :5].astype(int) + b.pixels[:4, :5].astype(int)) // 2
    assert np.array_equal(out.pixels, expected)


def test_merge_resize_mode_grows_the_smaller_image():
    a = Image.new(2, 2, (100, 100, 100))
    b = Image.new(4, 4, (0, 0, 0))
    out = merge(a, b, MergeMode.RESIZE)
    assert out.size == (4, 4)
    assert out.pixel(3, 3) == (50, 50, 50)
