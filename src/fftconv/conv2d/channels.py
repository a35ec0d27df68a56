# src/fftconv/conv2d/channels.py
"""Split images of any supported pixel format into float channels and back."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from fftconv.errors import DimensionMismatchError, UnsupportedFormatError

ArrayLike = np.ndarray

__all__ = [
    "LAYOUTS",
    "PixelFormat",
    "sample_max",
    "split",
    "join",
]

# channel count -> Pillow-style layout name
LAYOUTS = {1: "L", 2: "LA", 3: "RGB", 4: "RGBA"}

_INTEGER_DTYPES = (np.dtype(np.uint8), np.dtype(np.uint16))


@dataclass(frozen=True)
class PixelFormat:
    """
    Layout and sample type of an external image.

    Attributes
    ----------
    channels : int
        1 (gray), 2 (gray+alpha), 3 (RGB) or 4 (RGBA).
    dtype : numpy dtype
        uint8, uint16 or a float type.
    squeeze : bool
        True if a single-channel image is 2D (H, W) rather than (H, W, 1).
    """

    channels: int
    dtype: np.dtype
    squeeze: bool = False

    def __post_init__(self) -> None:
        if self.channels not in LAYOUTS:
            raise UnsupportedFormatError(f"Unsupported channel count {self.channels}")
        object.__setattr__(self, "dtype", np.dtype(self.dtype))
        sample_max(self.dtype)

    @property
    def layout(self) -> str:
        return LAYOUTS[self.channels]

    @property
    def has_alpha(self) -> bool:
        return self.channels in (2, 4)


def sample_max(dtype) -> float:
    """
    Maximum representable sample value: 255, 65535, or 1.0 for floats.
    """
    dt = np.dtype(dtype)
    if dt in _INTEGER_DTYPES:
        return float(np.iinfo(dt).max)
    if np.issubdtype(dt, np.floating):
        return 1.0
    raise UnsupportedFormatError(f"Unsupported sample type {dt}")


def split(image: ArrayLike) -> Tuple[List[ArrayLike], PixelFormat]:
    """
    Split an image into independent normalized float channels.

    Parameters
    ----------
    image : ndarray
        (H, W) or (H, W, C) with C in 1..4; uint8, uint16 or float samples.

    Returns
    -------
    channels : list of ndarray, shape (H, W), float32
        One buffer per channel, samples divided by :func:`sample_max`.
    fmt : PixelFormat
        Format needed by :func:`join` to rebuild the image.
    """
    arr = np.asarray(image)

    if arr.ndim == 2:
        planes = arr[..., None]
    elif arr.ndim == 3:
        planes = arr
    else:
        raise UnsupportedFormatError(f"Expected 2D or 3D image, got shape {arr.shape}")

    fmt = PixelFormat(channels=planes.shape[2], dtype=arr.dtype, squeeze=arr.ndim == 2)
    scale = np.float32(sample_max(arr.dtype))

    channels = [planes[..., c].astype(np.float32) / scale for c in range(fmt.channels)]
    return channels, fmt


def join(channels: Sequence[ArrayLike], fmt: PixelFormat) -> ArrayLike:
    """
    Recombine float channels into an image of format `fmt`.

    Values are clamped to [0, 1] and scaled to the destination range;
    integer destinations use ``round(f * max)`` (f >= 1 -> max, f <= 0 -> 0).

    Parameters
    ----------
    channels : sequence of ndarray, shape (H, W)
        One buffer per channel of `fmt`.
    fmt : PixelFormat
        Destination format, usually the one returned by :func:`split`.

    Returns
    -------
    image : ndarray
        (H, W) if ``fmt.squeeze`` else (H, W, C), dtype ``fmt.dtype``.
    """
    if len(channels) != fmt.channels:
        raise DimensionMismatchError(
            f"{fmt.layout} needs {fmt.channels} channels, got {len(channels)}"
        )
    planes = [np.asarray(c, dtype=np.float64) for c in channels]
    shape = planes[0].shape
    if len(shape) != 2 or any(p.shape != shape for p in planes):
        raise DimensionMismatchError(
            f"Channel shapes differ or are not 2D: {[p.shape for p in planes]}"
        )

    stacked = np.clip(np.stack(planes, axis=-1), 0.0, 1.0)

    if fmt.dtype in _INTEGER_DTYPES:
        out = np.round(stacked * sample_max(fmt.dtype)).astype(fmt.dtype)
    else:
        out = stacked.astype(fmt.dtype)

    if fmt.squeeze and fmt.channels == 1:
        return out[..., 0]
    return out
