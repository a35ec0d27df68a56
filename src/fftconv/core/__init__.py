"""
fftconv.core
============

Low-level computational primitives for spectral convolution.

Submodules
----------
- :mod:`fftconv.core.fft`   : separable 2D FFT with centering shift.
- :mod:`fftconv.core.align` : centered zero-fill / edge-clamp resizing.
- :mod:`fftconv.core.grids` : pixel-center coordinate grids.
- :mod:`fftconv.core.norms` : sum / peak normalization helpers.
"""

from .fft import (
    Direction,
    next_fast_len_ge,
    center_shift,
    transform,
    forward,
    inverse,
    spectral_multiply,
)
from .align import (
    ZeroFill,
    EdgeClamp,
    center_offset,
    align,
    crop_center,
)
from .grids import (
    pixel_center_coords,
    spatial_grid_2d,
    squared_radius_grid,
)
from .norms import (
    SUM_EPSILON,
    sum_normalize,
    peak_normalize,
)

__all__ = [
    # fft
    "Direction",
    "next_fast_len_ge",
    "center_shift",
    "transform",
    "forward",
    "inverse",
    "spectral_multiply",
    # align
    "ZeroFill",
    "EdgeClamp",
    "center_offset",
    "align",
    "crop_center",
    # grids
    "pixel_center_coords",
    "spatial_grid_2d",
    "squared_radius_grid",
    # norms
    "SUM_EPSILON",
    "sum_normalize",
    "peak_normalize",
]
