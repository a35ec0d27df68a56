"""
fftconv
Spectral (FFT) image convolution with radial kernels.
"""

from importlib import metadata as _metadata

try:
    __version__ = _metadata.version("fftconv")
except _metadata.PackageNotFoundError:
    # Not installed (dev mode) or no metadata available
    __version__ = "0.0.0.dev0"

# Re-export subpackages for convenience
from . import core, conv2d, io  # noqa: E402
from .errors import (  # noqa: E402
    FftconvError,
    InvalidParameterError,
    DimensionMismatchError,
    UnsupportedFormatError,
    DegenerateKernelWarning,
)

__all__ = [
    "core",
    "conv2d",
    "io",
    "FftconvError",
    "InvalidParameterError",
    "DimensionMismatchError",
    "UnsupportedFormatError",
    "DegenerateKernelWarning",
    "__version__",
]
