import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Allow running the suite from a checkout without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pixelkit import F32, RGB, U8, Image  # noqa: E402


def make_gradient(width=12, height=8, sample_type=F32, color=RGB):
    """Return an image whose channels vary with x, y and x + y."""

    xs = np.linspace(0.0, 1.0, width)
    ys = np.linspace(0.0, 1.0, height)
    grid_x, grid_y = np.meshgrid(xs, ys)
    planes = [grid_x, grid_y, (grid_x + grid_y) / 2.0, np.full_like(grid_x, 0.75)]
    values = np.stack(planes[: color.channels], axis=-1)
    image = Image.new((width, height), sample_type, color)
    image.store_normalized(0, values)
    return image


@pytest.fixture
def gradient():
    return make_gradient()


@pytest.fixture
def gradient_u8():
    return make_gradient(sample_type=U8)


@pytest.fixture
def checker():
    """8-bit RGB checkerboard with 2x2 cells."""

    ys, xs = np.mgrid[0:10, 0:10]
    mask = ((xs // 2 + ys // 2) % 2).astype(np.uint8) * 255
    return Image.from_array(np.stack([mask, mask, mask], axis=-1))


@pytest.fixture
def make_image():
    """Factory fixture building gradient images of any size and layout."""

    return make_gradient
