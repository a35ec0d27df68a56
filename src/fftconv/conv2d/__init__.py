"""
fftconv.conv2d
==============

Image convolution built on the spectral primitives.

Submodules
----------
- :mod:`fftconv.conv2d.kernels`  : radial kernel families and synthesis.
- :mod:`fftconv.conv2d.channels` : pixel format <-> float channel buffers.
- :mod:`fftconv.conv2d.image`    : per-channel FFT convolution.
"""

from .kernels import (
    Identity,
    Gaussian,
    Exponential,
    Polynomial,
    Smoothify,
    KERNEL_FAMILIES,
    generate_radial,
    normalize_kernel,
    weight_function,
    generate_kernel,
    generate_identity,
    generate_gauss,
    generate_exp,
    generate_poly,
    generate_smoothify,
    kernel_spec_from_params,
    parse_kernel_spec,
)
from .channels import PixelFormat, sample_max, split, join
from .image import EDGE_MODES, kernel_spectrum, convolve_channels, convolve_image

__all__ = [
    # kernels
    "Identity",
    "Gaussian",
    "Exponential",
    "Polynomial",
    "Smoothify",
    "KERNEL_FAMILIES",
    "generate_radial",
    "normalize_kernel",
    "weight_function",
    "generate_kernel",
    "generate_identity",
    "generate_gauss",
    "generate_exp",
    "generate_poly",
    "generate_smoothify",
    "kernel_spec_from_params",
    "parse_kernel_spec",
    # channels
    "PixelFormat",
    "sample_max",
    "split",
    "join",
    # convolution
    "EDGE_MODES",
    "kernel_spectrum",
    "convolve_channels",
    "convolve_image",
]
