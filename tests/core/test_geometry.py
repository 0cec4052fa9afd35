import pytest

from pixelkit import DimensionError, Point, Region, Size
from pixelkit.core.geometry import as_size


def test_size_multiplies_by_integers():
    assert Size(3, 4) * 2 == Size(6, 8)
    assert 3 * Size(1, 2) == Size(3, 6)
    assert Size(3, 4).area == 12
    assert Size(3, 4).transposed() == Size(4, 3)


def test_sizes_must_be_positive():
    with pytest.raises(DimensionError):
        as_size((0, 3))


def test_region_bounds():
    region = Region.new((2, 1), (3, 2))
    assert (region.right, region.bottom) == (5, 3)
    assert list(region.rows) == [1, 2]
    assert list(region.columns) == [2, 3, 4]
    assert region.contains(Point(4, 2))
    assert not region.contains((5, 2))
    assert region.fits_within((5, 3))
    assert not region.fits_within((4, 3))
