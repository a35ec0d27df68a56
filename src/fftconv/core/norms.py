# src/fftconv/core/norms.py
"""Normalization utilities for kernels and buffers."""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

__all__ = [
    "SUM_EPSILON",
    "sum_normalize",
    "peak_normalize",
]

# Smallest raw sum that is still divided out (single-precision epsilon).
SUM_EPSILON = float(np.finfo(np.float32).eps)


def sum_normalize(x: np.ndarray, eps: Optional[float] = None) -> Tuple[np.ndarray, bool]:
    """
    Scale `x` so that its elements sum to 1.

    Parameters
    ----------
    x : ndarray
        Input weights.
    eps : float | None
        Threshold below which the sum is considered degenerate.
        Default: :data:`SUM_EPSILON`.

    Returns
    -------
    y : ndarray
        Normalized copy of `x` (same dtype), or an unchanged copy when the
        sum is below `eps`.
    normalized : bool
        False when normalization was skipped.
    """
    if eps is None:
        eps = SUM_EPSILON
    x_arr = np.array(x, copy=True)
    total = float(np.sum(x_arr, dtype=np.float64))
    if not total >= eps:
        return x_arr, False
    y = (x_arr.astype(np.float64) / total).astype(x_arr.dtype, copy=False)
    return y, True


def peak_normalize(x: np.ndarray, peak: float = 1.0) -> np.ndarray:
    """
    Peak-normalize to a target absolute maximum.

    Parameters
    ----------
    x : ndarray
        Input buffer.
    peak : float, default=1.0
        Desired maximum absolute value.

    Returns
    -------
    y : ndarray, float64
        Scaled buffer. If max abs is 0, returns x unchanged.
    """
    x_arr = np.asarray(x, dtype=np.float64)
    m = float(np.max(np.abs(x_arr))) if x_arr.size > 0 else 0.0
    if m <= 0.0:
        return x_arr
    scale = float(peak) / m
    return x_arr * scale
