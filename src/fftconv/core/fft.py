# src/fftconv/core/fft.py
"""Separable 2D FFT with centering shift, and frequency-domain helpers."""
from __future__ import annotations

import enum
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from scipy.fft import next_fast_len as _scipy_next_fast_len

from fftconv.errors import DimensionMismatchError

ArrayLike = np.ndarray
AxesLike = Optional[Union[int, Sequence[int]]]

__all__ = [
    "Direction",
    "next_fast_len_ge",
    "center_shift",
    "transform",
    "forward",
    "inverse",
    "spectral_multiply",
]


class Direction(enum.Enum):
    """Direction of a spectral transform."""

    FORWARD = "forward"
    INVERSE = "inverse"


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------

def next_fast_len_ge(n: int) -> int:
    """
    Return a fast FFT length >= n, as planned by scipy.fft.

    Parameters
    ----------
    n : int
        Minimum length.

    Returns
    -------
    int
        Fast length >= n.
    """
    if n <= 1:
        return 1
    return int(_scipy_next_fast_len(int(n)))


def _normalize_axes(x: ArrayLike, axes: AxesLike) -> Tuple[int, ...]:
    if axes is None:
        return tuple(range(x.ndim))
    if isinstance(axes, int):
        axes = (axes,)
    # normalize negatives and remove duplicates preserving order
    norm = []
    for a in axes:
        a = int(a)
        if a < 0:
            a += x.ndim
        if a not in norm:
            norm.append(a)
    return tuple(norm)


def center_shift(x: ArrayLike, axes: AxesLike = None, inverse: bool = False) -> ArrayLike:
    """
    Centering shift (fftshift) along `axes`.

    Each axis of length n is rotated by n // 2, so index 0 lands at n // 2.
    For even n this is a plain swap of the two halves. For odd n the single
    middle element moves along with the second half, e.g.
    ``[a, b, c] -> [c, a, b]`` and ``[a, b, c, d, e] -> [d, e, a, b, c]``.

    Parameters
    ----------
    x : ndarray
        Input array.
    axes : int | sequence[int] | None
        Axes to shift. Default: all axes.
    inverse : bool
        If True, rotate by -(n // 2) instead, undoing a forward shift
        exactly for both parities.

    Returns
    -------
    ndarray
        Shifted copy of `x`.
    """
    arr = np.asarray(x)
    axes_t = _normalize_axes(arr, axes)
    if not axes_t:
        return arr.copy()
    shifts = [arr.shape[ax] // 2 for ax in axes_t]
    if inverse:
        shifts = [-s for s in shifts]
    return np.roll(arr, shifts, axis=axes_t)


# ---------------------------------------------------------------------------
# Separable 2D transform
# ---------------------------------------------------------------------------

def _transform_rows(buf: ArrayLike, direction: Direction) -> ArrayLike:
    """1D transform of every row, centering shift included. Unscaled."""
    if direction is Direction.FORWARD:
        return center_shift(np.fft.fft(buf, axis=-1), axes=-1)
    # norm="forward" leaves the inverse transform unscaled
    return np.fft.ifft(center_shift(buf, axes=-1, inverse=True), axis=-1, norm="forward")


def transform(buffer: ArrayLike, direction: Union[Direction, str] = Direction.FORWARD) -> ArrayLike:
    """
    Separable 2D discrete Fourier transform with centering shift.

    Pipeline: complex cast → transform rows (length W) → transpose →
    transform rows again (the original columns, length H) → transpose back.

    In the forward direction the centering shift follows each 1D transform,
    so the zero frequency sits at ``(H // 2, W // 2)``. In the inverse
    direction the opposite shift precedes each 1D transform, so
    ``transform(transform(x, FORWARD), INVERSE) == H * W * x``.

    No 1/(H*W) scaling is applied in either direction; that is left to the
    caller (see :func:`spectral_multiply`).

    Parameters
    ----------
    buffer : ndarray, shape (H, W)
        Real or complex samples, row-major.
    direction : Direction or {"forward", "inverse"}
        Transform direction.

    Returns
    -------
    ndarray, shape (H, W), complex128
        Spectral buffer (forward) or spatial buffer (inverse).

    Raises
    ------
    DimensionMismatchError
        If `buffer` is not 2D or has a zero-length dimension.
    """
    direction = Direction(direction)
    buf = np.asarray(buffer)
    if buf.ndim != 2:
        raise DimensionMismatchError(f"Expected 2D buffer for transform, got shape {buf.shape}")
    height, width = buf.shape
    if height == 0 or width == 0:
        raise DimensionMismatchError(f"Cannot transform an empty {height}x{width} buffer")

    res = buf.astype(np.complex128)

    # Process lines
    res = _transform_rows(res, direction)

    # Process columns
    res = _transform_rows(res.T, direction)

    return np.ascontiguousarray(res.T)


def forward(buffer: ArrayLike) -> ArrayLike:
    """Forward spectral transform, see :func:`transform`."""
    return transform(buffer, Direction.FORWARD)


def inverse(spectrum: ArrayLike) -> ArrayLike:
    """Inverse spectral transform (unscaled), see :func:`transform`."""
    return transform(spectrum, Direction.INVERSE)


# ---------------------------------------------------------------------------
# Frequency-domain multiplication
# ---------------------------------------------------------------------------

def spectral_multiply(a: ArrayLike, b: ArrayLike, scale: Optional[float] = None) -> ArrayLike:
    """
    Element-wise product of two spectra, scaled.

    Parameters
    ----------
    a, b : ndarray
        Spectra of identical shape.
    scale : float | None
        Factor applied to every product. Default: ``1 / a.size``, the
        normalization of an unscaled forward/inverse transform pair.

    Returns
    -------
    ndarray
        ``a * b * scale``.
    """
    A = np.asarray(a)
    B = np.asarray(b)
    if A.shape != B.shape:
        raise DimensionMismatchError(
            f"Spectra shapes differ: {A.shape} vs {B.shape}"
        )
    if scale is None:
        scale = 1.0 / float(A.size)
    return A * B * scale
