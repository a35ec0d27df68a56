# src/fftconv/core/grids.py
"""Pixel-center coordinate grids for radial kernels."""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

__all__ = [
    "pixel_center_coords",
    "spatial_grid_2d",
    "squared_radius_grid",
]


def pixel_center_coords(n: int) -> np.ndarray:
    """
    Signed distance of each pixel center from the middle of an n-pixel axis.

    Uses the pixel-center convention ``i + 0.5 - n / 2``: for n=3 this is
    [-1, 0, 1], for n=4 it is [-1.5, -0.5, 0.5, 1.5].
    """
    if n <= 0:
        raise ValueError("n must be positive")
    return np.arange(n, dtype=np.float64) + 0.5 - n * 0.5


def spatial_grid_2d(H: int, W: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Return 2D pixel-center coordinates (y, x), each of shape (H, W).
    """
    y = pixel_center_coords(H)
    x = pixel_center_coords(W)
    return np.meshgrid(y, x, indexing="ij")


def squared_radius_grid(size: int, width: Optional[int] = None) -> np.ndarray:
    """
    Squared Euclidean distance of every pixel center from the grid center.

    Parameters
    ----------
    size : int
        Grid height (and width, if `width` is None).
    width : int | None
        Grid width for non-square grids.

    Returns
    -------
    l2 : ndarray, shape (size, width or size), float64
    """
    W = size if width is None else width
    y, x = spatial_grid_2d(size, W)
    return x * x + y * y
