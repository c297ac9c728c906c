import pytest
from PIL import Image as PILImage

from photo_smith.errors import ImageIOError
from photo_smith.image import Image
from photo_smith.imageio import is_supported_image, load_image, save_image


def test_save_and_load_png(tmp_path, gradient):
    path = tmp_path / "out.png"
    save_image(gradient, path)
    loaded = load_image(path)
    assert loaded.image == gradient
    assert loaded.path == str(path)


def test_load_drops_alpha(tmp_path):
    path = tmp_path / "rgba.png"
    PILImage.new("RGBA", (3, 2), (10, 20, 30, 40)).save(path)
    loaded = load_image(path)
    assert loaded.image.size == (3, 2)
    assert loaded.image.pixel(2, 1) == (10, 20, 30)


def test_load_tga_and_grayscale(tmp_path):
    tga = tmp_path / "in.tga"
    PILImage.new("RGB", (2, 2), (1, 2, 3)).save(tga)
    assert load_image(tga).image.pixel(1, 1) == (1, 2, 3)

    gray = tmp_path / "gray.bmp"
    PILImage.new("L", (2, 2), 77).save(gray)
    assert load_image(gray).image.pixel(0, 0) == (77, 77, 77)


def test_dpi_is_carried_to_the_next_save(tmp_path):
    src = tmp_path / "dpi.png"
    PILImage.new("RGB", (2, 2)).save(src, dpi=(300, 300))
    loaded = load_image(src)
    assert "dpi" in loaded.save_kwargs

    out = tmp_path / "copy.png"
    save_image(loaded.image, out, loaded.save_kwargs)
    with PILImage.open(out) as reopened:
        assert round(reopened.info["dpi"][0]) == 300


def test_save_jpeg(tmp_path):
    path = tmp_path / "out.jpg"
    save_image(Image.new(4, 4, (200, 100, 50)), path)
    with PILImage.open(path) as reopened:
        assert reopened.format == "JPEG"
        assert reopened.size == (4, 4)


def test_missing_file(tmp_path):
    with pytest.raises(ImageIOError):
        load_image(tmp_path / "missing.png")


def test_corrupt_file(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(OSError):
        load_image(path)


def test_unsupported_formats(tmp_path):
    assert not is_supported_image("clip.gif")
    with pytest.raises(ImageIOError):
        load_image(tmp_path / "clip.gif")
    with pytest.raises(ImageIOError):
        save_image(Image.new(2, 2), tmp_path / "out.tga")


def test_save_empty_image(tmp_path):
    with pytest.raises(ImageIOError):
        save_image(Image(), tmp_path / "empty.png")
