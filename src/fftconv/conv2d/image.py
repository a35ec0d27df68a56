# src/fftconv/conv2d/image.py
"""2D image convolution via FFT: one shared kernel spectrum, every channel convolved."""
from __future__ import annotations

import logging
from typing import List, Literal, Sequence, Tuple

import numpy as np

from fftconv.core.align import EdgeClamp, ZeroFill, align, crop_center
from fftconv.core.fft import center_shift, forward, inverse, next_fast_len_ge, spectral_multiply
from fftconv.conv2d.channels import join, split
from fftconv.errors import DimensionMismatchError, InvalidParameterError

logger = logging.getLogger(__name__)

ArrayLike = np.ndarray
EdgeMode = Literal["wrap", "clamp", "zero"]

EDGE_MODES: Tuple[str, ...] = ("wrap", "clamp", "zero")

__all__ = [
    "EDGE_MODES",
    "kernel_spectrum",
    "convolve_channel",
    "convolve_channels",
    "convolve_image",
]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _ensure_2d(x: ArrayLike, what: str) -> ArrayLike:
    x = np.asarray(x)
    if x.ndim != 2:
        raise DimensionMismatchError(f"Expected 2D {what}, got shape {x.shape}")
    if x.shape[0] == 0 or x.shape[1] == 0:
        raise DimensionMismatchError(f"Empty {what} of shape {x.shape}")
    return x


def _check_channels(channels: Sequence[ArrayLike]) -> Tuple[List[ArrayLike], int, int]:
    if len(channels) == 0:
        raise DimensionMismatchError("No channel buffers to convolve")
    bufs = [_ensure_2d(c, "channel buffer").astype(np.float32, copy=False) for c in channels]
    height, width = bufs[0].shape
    for i, b in enumerate(bufs[1:], start=1):
        if b.shape != (height, width):
            raise DimensionMismatchError(
                f"Channel {i} has shape {b.shape}, channel 0 has {(height, width)}"
            )
    return bufs, height, width


def _working_shape(height: int, width: int, kernel_shape: Tuple[int, int], edge: str) -> Tuple[int, int]:
    """
    Grid the FFT runs on. "wrap" uses the image grid itself; padded modes
    grow each side by half the kernel and round up to a fast FFT length.
    """
    if edge == "wrap":
        return height, width
    kh, kw = kernel_shape
    return (
        next_fast_len_ge(height + 2 * (kh // 2)),
        next_fast_len_ge(width + 2 * (kw // 2)),
    )


def _wrap_kernel(ker: ArrayLike, width: int, height: int) -> ArrayLike:
    """Fold a kernel larger than the grid onto it, modulo (height, width)."""
    kh, kw = ker.shape
    rows = (np.arange(kh) - kh // 2) % height
    cols = (np.arange(kw) - kw // 2) % width
    out = np.zeros((height, width), dtype=np.float64)
    np.add.at(out, np.ix_(rows, cols), ker.astype(np.float64))
    return out


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def kernel_spectrum(kernel: ArrayLike, width: int, height: int) -> ArrayLike:
    """
    Spectrum of `kernel` on a (height, width) grid.

    The kernel is zero-filled to the grid size, centered, then rotated so
    that its center cell sits at index (0, 0). With the kernel anchored at
    the origin the convolution output is not displaced, for odd and even
    grid sizes alike.

    Taps that fall outside a grid smaller than the kernel wrap around and
    accumulate, as in circular convolution, so the kernel sum is kept.

    Returns
    -------
    ndarray, shape (height, width), complex128
    """
    ker = _ensure_2d(kernel, "kernel")
    if ker.shape[0] > height or ker.shape[1] > width:
        return forward(_wrap_kernel(ker, width, height))
    aligned = align(ker.astype(np.float32, copy=False), width, height, ZeroFill(0.0))
    return forward(center_shift(aligned, inverse=True))


def convolve_channel(channel: ArrayLike, spectrum: ArrayLike) -> ArrayLike:
    """
    Circularly convolve one channel with a precomputed kernel spectrum.

    Forward transform → multiply scaled by 1/(W*H) → inverse transform →
    magnitude.

    Returns
    -------
    ndarray, same shape as `channel`, float32
    """
    buf = _ensure_2d(channel, "channel buffer")
    height, width = buf.shape
    product = spectral_multiply(forward(buf), spectrum, scale=1.0 / float(width * height))
    return np.abs(inverse(product)).astype(np.float32)


def convolve_channels(
    channels: Sequence[ArrayLike],
    kernel: ArrayLike,
    edge: EdgeMode = "wrap",
) -> List[ArrayLike]:
    """
    Convolve every channel buffer with the same kernel.

    The kernel spectrum is computed once and shared by all channels. Each
    channel, alpha included, is convolved independently and identically.

    Parameters
    ----------
    channels : sequence of ndarray, shape (H, W)
        Float channel buffers of identical shape.
    kernel : ndarray, shape (kh, kw)
        Convolution kernel.
    edge : {"wrap", "clamp", "zero"}
        - "wrap": circular convolution on the image grid (content wraps
          around opposite borders).
        - "clamp": image extended by repeating its border pixels.
        - "zero": image extended with zeros (borders darken).

    Returns
    -------
    list of ndarray, shape (H, W), float32

    Raises
    ------
    DimensionMismatchError
        Empty list, non-2D or differently shaped buffers, empty kernel.
    InvalidParameterError
        Unknown edge mode.
    """
    if edge not in EDGE_MODES:
        raise InvalidParameterError(f"Unknown edge mode {edge!r}; expected one of {EDGE_MODES}")

    bufs, height, width = _check_channels(channels)
    ker = _ensure_2d(kernel, "kernel")
    work_h, work_w = _working_shape(height, width, ker.shape, edge)

    logger.debug(
        "Convolving %d channel(s) %dx%d with %dx%d kernel on %dx%d grid (edge=%s)",
        len(bufs), height, width, ker.shape[0], ker.shape[1], work_h, work_w, edge,
    )

    spectrum = kernel_spectrum(ker, work_w, work_h)
    policy = EdgeClamp() if edge == "clamp" else ZeroFill(0.0)

    out: List[ArrayLike] = []
    for buf in bufs:
        if edge == "wrap":
            out.append(convolve_channel(buf, spectrum))
            continue
        padded = align(buf, work_w, work_h, policy)
        y = convolve_channel(padded, spectrum)
        out.append(np.ascontiguousarray(crop_center(y, width, height)))
    return out


def convolve_image(image: ArrayLike, kernel: ArrayLike, edge: EdgeMode = "wrap") -> ArrayLike:
    """
    Convolve an image of any supported pixel format with `kernel`.

    Parameters
    ----------
    image : ndarray
        (H, W) or (H, W, C), C in 1..4, uint8 / uint16 / float samples.
    kernel : ndarray
        2D kernel.
    edge : {"wrap", "clamp", "zero"}
        Border handling, see :func:`convolve_channels`.

    Returns
    -------
    ndarray
        Convolved image with the same shape and dtype as `image`.
    """
    channels, fmt = split(image)
    result = convolve_channels(channels, kernel, edge=edge)
    return join(result, fmt)
