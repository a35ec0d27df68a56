# src/fftconv/core/align.py
"""Centered resizing of 2D buffers with zero-fill or edge-clamp borders."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from fftconv.errors import DimensionMismatchError, InvalidParameterError

ArrayLike = np.ndarray

__all__ = [
    "ZeroFill",
    "EdgeClamp",
    "BorderPolicy",
    "center_offset",
    "align",
    "crop_center",
]


@dataclass(frozen=True)
class ZeroFill:
    """Fill cells outside the source with a constant."""

    value: float = 0.0


@dataclass(frozen=True)
class EdgeClamp:
    """Repeat the nearest source row/column outward."""


BorderPolicy = Union[ZeroFill, EdgeClamp]


def center_offset(source_dim: int, target_dim: int) -> int:
    """
    Offset of a centered source inside a target along one axis.

    ``target_dim // 2 - source_dim // 2``. Negative when the target is
    smaller than the source (the source is then cropped around the same
    center).
    """
    return int(target_dim) // 2 - int(source_dim) // 2


def _source_index(source_dim: int, target_dim: int) -> np.ndarray:
    return np.arange(target_dim) - center_offset(source_dim, target_dim)


def align(
    source: ArrayLike,
    target_width: int,
    target_height: int,
    policy: BorderPolicy = ZeroFill(),
) -> ArrayLike:
    """
    Resize `source` to (target_height, target_width), centered.

    Target cell ``(i, j)`` reads source cell
    ``(i - center_offset(H, target_height), j - center_offset(W, target_width))``.

    Parameters
    ----------
    source : ndarray, shape (H, W)
        Buffer to embed (kernel or image channel).
    target_width, target_height : int
        Output size.
    policy : ZeroFill | EdgeClamp
        - ZeroFill(value): out-of-range cells get `value`.
        - EdgeClamp(): out-of-range coordinates are clamped to the nearest
          valid row/column.

    Returns
    -------
    ndarray, shape (target_height, target_width)
        New buffer, same dtype as `source`.
    """
    src = np.asarray(source)
    if src.ndim != 2:
        raise DimensionMismatchError(f"Expected 2D buffer to align, got shape {src.shape}")
    src_h, src_w = src.shape
    if src_h == 0 or src_w == 0:
        raise DimensionMismatchError(f"Cannot align an empty {src_h}x{src_w} buffer")
    if int(target_width) <= 0 or int(target_height) <= 0:
        raise DimensionMismatchError(
            f"Target size must be positive, got {target_width}x{target_height}"
        )

    rows = _source_index(src_h, int(target_height))
    cols = _source_index(src_w, int(target_width))

    if isinstance(policy, EdgeClamp):
        rows = np.clip(rows, 0, src_h - 1)
        cols = np.clip(cols, 0, src_w - 1)
        return src[np.ix_(rows, cols)]

    if isinstance(policy, ZeroFill):
        out = np.full((int(target_height), int(target_width)), policy.value, dtype=src.dtype)
        row_ok = (rows >= 0) & (rows < src_h)
        col_ok = (cols >= 0) & (cols < src_w)
        out[np.ix_(row_ok, col_ok)] = src[np.ix_(rows[row_ok], cols[col_ok])]
        return out

    raise InvalidParameterError(f"Unknown border policy {policy!r}")


def crop_center(buffer: ArrayLike, width: int, height: int) -> ArrayLike:
    """
    Undo a centered embedding: cut a (height, width) window out of `buffer`.

    Uses the same offset as :func:`align`, so
    ``crop_center(align(x, W2, H2, p), W, H) == x`` for any policy.
    """
    buf = np.asarray(buffer)
    if buf.ndim != 2:
        raise DimensionMismatchError(f"Expected 2D buffer to crop, got shape {buf.shape}")
    if width > buf.shape[1] or height > buf.shape[0]:
        raise DimensionMismatchError(
            f"Crop {height}x{width} does not fit in buffer {buf.shape[0]}x{buf.shape[1]}"
        )
    return align(buf, width, height, ZeroFill(0.0))
