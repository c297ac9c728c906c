import numpy as np
import pytest

from photo_smith.image import Image


def _gradient(width=8, height=6):
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.stack([(xs * 30) % 256, (ys * 40) % 256, ((xs + ys) * 17) % 256], axis=2)
    return Image(pixels)


@pytest.fixture
def make_gradient():
    return _gradient


@pytest.fixture
def gradient():
    return _gradient()


@pytest.fixture
def corners():
    return Image.from_rows(
        [
            [(255, 0, 0), (0, 255, 0)],
            [(0, 0, 255), (255, 255, 0)],
        ]
    )
