import numpy as np

from fftconv.core.grids import pixel_center_coords, spatial_grid_2d, squared_radius_grid
from fftconv.core.norms import SUM_EPSILON, peak_normalize, sum_normalize


def test_sum_normalize_unit_sum():
    y, ok = sum_normalize(np.ones(4, dtype=np.float32))
    assert ok
    assert y.dtype == np.float32
    np.testing.assert_allclose(y, 0.25)


def test_sum_normalize_skips_degenerate():
    x = np.zeros(3)
    y, ok = sum_normalize(x)
    assert not ok
    np.testing.assert_array_equal(y, x)
    assert y is not x

    # negative or tiny sums are left alone too
    _, ok = sum_normalize(np.array([1.0, -1.0]))
    assert not ok
    _, ok = sum_normalize(np.array([SUM_EPSILON / 4]))
    assert not ok


def test_peak_normalize():
    np.testing.assert_allclose(peak_normalize(np.array([-2.0, 1.0])), [-1.0, 0.5])
    np.testing.assert_allclose(peak_normalize(np.array([0.5, 0.25]), peak=2.0), [2.0, 1.0])
    np.testing.assert_array_equal(peak_normalize(np.zeros(3)), np.zeros(3))


def test_pixel_center_coords():
    np.testing.assert_allclose(pixel_center_coords(1), [0.0])
    np.testing.assert_allclose(pixel_center_coords(3), [-1.0, 0.0, 1.0])
    np.testing.assert_allclose(pixel_center_coords(4), [-1.5, -0.5, 0.5, 1.5])


def test_squared_radius_grid():
    l2 = squared_radius_grid(3)
    assert l2.shape == (3, 3)
    assert l2[1, 1] == 0.0
    np.testing.assert_allclose(l2[[0, 0, 2, 2], [0, 2, 0, 2]], 2.0)
    np.testing.assert_allclose(l2, l2.T)

    rect = squared_radius_grid(3, width=4)
    assert rect.shape == (3, 4)
    np.testing.assert_allclose(rect[1], [2.25, 0.25, 0.25, 2.25])


def test_spatial_grid_2d_axes():
    y, x = spatial_grid_2d(2, 3)
    assert y.shape == x.shape == (2, 3)
    np.testing.assert_allclose(y[:, 0], [-0.5, 0.5])
    np.testing.assert_allclose(x[0], [-1.0, 0.0, 1.0])
