# tests/test_conv2d_kernels.py
import numpy as np
import pytest

from fftconv.conv2d.kernels import (
    Exponential,
    Gaussian,
    Identity,
    Polynomial,
    Smoothify,
    generate_exp,
    generate_gauss,
    generate_identity,
    generate_kernel,
    generate_poly,
    generate_radial,
    generate_smoothify,
    kernel_spec_from_params,
    normalize_kernel,
    parse_kernel_spec,
    weight_function,
)
from fftconv.core.grids import squared_radius_grid
from fftconv.errors import DegenerateKernelWarning, InvalidParameterError

RADIAL_SPECS = [
    Gaussian(sigma=2.0),
    Exponential(power=1.0, sigma=2.0),
    Exponential(power=0.5, sigma=3.0),
    Polynomial(power=2.0, sigma=4.0),
    Smoothify(sigma=1.0),
]


def _reference(weights: np.ndarray) -> np.ndarray:
    return weights / weights.sum()


@pytest.mark.parametrize("spec", RADIAL_SPECS)
@pytest.mark.parametrize("size", [1, 4, 7, 16])
def test_kernels_are_normalized_and_symmetric(spec, size):
    k = generate_kernel(spec, size)
    assert k.shape == (size, size)
    assert k.dtype == np.float32
    assert abs(float(k.sum(dtype=np.float64)) - 1.0) < 1e-5
    assert np.all(k >= 0.0)
    np.testing.assert_allclose(k, k.T, atol=1e-7)
    np.testing.assert_allclose(k, k[::-1, ::-1], atol=1e-7)


@pytest.mark.parametrize("spec", RADIAL_SPECS)
def test_kernels_are_read_only(spec):
    k = generate_kernel(spec, 5)
    with pytest.raises(ValueError):
        k[0, 0] = 1.0


def test_identity_ignores_size():
    for size in (1, 51, 3000):
        k = generate_kernel(Identity(), size)
        np.testing.assert_array_equal(k, [[1.0]])
    assert generate_identity().flags.writeable is False


def test_gaussian_matches_formula():
    l2 = squared_radius_grid(5)
    expected = _reference(np.exp(-l2 / (2.0 * 1.5**2)))
    np.testing.assert_allclose(generate_gauss(5, 1.5), expected, rtol=1e-5)


def test_exponential_matches_formula():
    l2 = squared_radius_grid(7)
    expected = _reference(np.exp(-(l2**1.0) / 2.0**1.0))
    np.testing.assert_allclose(generate_exp(7, 1.0, 2.0), expected, rtol=1e-5)


def test_polynomial_has_hard_cutoff():
    l2 = squared_radius_grid(9)
    k = generate_poly(9, 1.0, 2.0)
    assert np.all(k[l2 > 4.0] == 0.0)
    assert k[0, 0] == 0.0
    assert k[4, 4] == k.max()

    inside = l2 <= 4.0
    raw = np.zeros_like(l2)
    raw[inside] = 1.0 - np.sqrt(l2[inside]) / 2.0
    np.testing.assert_allclose(k, _reference(raw), rtol=1e-5, atol=1e-7)


def test_smoothify_decreases_from_center():
    k = generate_smoothify(11, 1.0)
    row = k[5, 5:]
    assert np.all(np.diff(row) < 0.0)
    # long tail: corners keep some weight
    assert k[0, 0] > 0.0


def test_even_size_peak_is_shared_by_four_center_cells():
    k = generate_gauss(4, 1.0)
    center = k[1:3, 1:3]
    np.testing.assert_allclose(center, center[0, 0])
    assert center[0, 0] == k.max()


def test_normalize_kernel():
    k = normalize_kernel(np.array([[1.0, 3.0]]))
    assert k.dtype == np.float32
    np.testing.assert_allclose(k, [[0.25, 0.75]])


def test_degenerate_kernel_warns_and_is_left_unnormalized(caplog):
    # radius smaller than the nearest pixel center: every weight is 0
    with pytest.warns(DegenerateKernelWarning):
        k = generate_poly(2, 1.0, 0.3)
    assert k.shape == (2, 2)
    np.testing.assert_array_equal(k, np.zeros((2, 2)))
    assert "normalization skipped" in caplog.text


@pytest.mark.parametrize("weight", [1e-9, -1.0])
def test_tiny_or_negative_sum_keeps_raw_weights(weight):
    with pytest.warns(DegenerateKernelWarning):
        k = generate_radial(3, lambda l2: np.full_like(l2, weight))
    np.testing.assert_array_equal(k, np.full((3, 3), weight, dtype=np.float32))
    assert k.dtype == np.float32


@pytest.mark.parametrize("size", [0, -3, 2.5])
def test_invalid_size(size):
    with pytest.raises(InvalidParameterError):
        generate_gauss(size, 1.0)


@pytest.mark.parametrize(
    "spec",
    [
        Gaussian(sigma=0.0),
        Gaussian(sigma=float("nan")),
        Exponential(power=1.0, sigma=0.0),
        Exponential(power=float("inf"), sigma=2.0),
        Polynomial(power=1.0, sigma=0.0),
        Polynomial(power=1.0, sigma=-2.0),
        Smoothify(sigma=0.0),
    ],
)
def test_near_zero_or_non_finite_parameters(spec):
    with pytest.raises(InvalidParameterError):
        generate_kernel(spec, 5)


def test_exponential_overflowing_denominator():
    with pytest.raises(InvalidParameterError):
        generate_exp(5, 400.0, 10.0)


def test_polynomial_negative_power_at_radius_is_rejected():
    # (0, +-2) sits exactly on radius 2: 0 ** -1 is infinite
    with pytest.raises(InvalidParameterError):
        generate_poly(5, -1.0, 2.0)


def test_weight_function_rejects_identity():
    with pytest.raises(InvalidParameterError):
        weight_function(Identity())


def test_generate_radial_checks_weights():
    with pytest.raises(InvalidParameterError):
        generate_radial(3, lambda l2: np.ones(3))
    with pytest.raises(InvalidParameterError):
        generate_radial(3, lambda l2: np.full_like(l2, np.nan))
    k = generate_radial(3, lambda l2: np.ones_like(l2))
    np.testing.assert_allclose(k, np.full((3, 3), 1.0 / 9.0), rtol=1e-6)


def test_kernel_spec_from_params():
    assert kernel_spec_from_params("Gaussian", (2.0, 1.0)) == Gaussian(sigma=2.0)
    assert kernel_spec_from_params("exponential", (0.5, 3)) == Exponential(power=0.5, sigma=3.0)
    assert kernel_spec_from_params("POLYNOMIAL", (2.0,)) == Polynomial(power=2.0, sigma=1.0)
    assert kernel_spec_from_params("Smoothify") == Smoothify(sigma=1.0)
    assert kernel_spec_from_params("Identity", (4.0, 5.0)) == Identity()
    with pytest.raises(InvalidParameterError):
        kernel_spec_from_params("Circle", (1.0,))


@pytest.mark.parametrize(
    "text, expected",
    [
        ("identity", Identity()),
        ("gaussian", Gaussian()),
        ("gaussian:sigma=2.0", Gaussian(sigma=2.0)),
        ("gaussian:σ=2", Gaussian(sigma=2.0)),
        ("Exponential:pow=0.5, sigma=8", Exponential(power=0.5, sigma=8.0)),
        ("polynomial:p=3,s=10", Polynomial(power=3.0, sigma=10.0)),
        ("smoothify:sigma=0.5", Smoothify(sigma=0.5)),
    ],
)
def test_parse_kernel_spec(text, expected):
    assert parse_kernel_spec(text) == expected


@pytest.mark.parametrize(
    "text",
    ["", "   ", "circle", "gaussian:power=2", "gaussian:sigma", "gaussian:sigma=abc"],
)
def test_parse_kernel_spec_errors(text):
    with pytest.raises(InvalidParameterError):
        parse_kernel_spec(text)


def test_polynomial_negative_radius_is_rejected():
    with pytest.raises(InvalidParameterError, match="radius"):
        weight_function(Polynomial(power=2.0, sigma=-3.0))
