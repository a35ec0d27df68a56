# src/fftconv/errors.py
"""Exceptions and warnings raised by the convolution engine."""
from __future__ import annotations

__all__ = [
    "FftconvError",
    "InvalidParameterError",
    "DimensionMismatchError",
    "UnsupportedFormatError",
    "DegenerateKernelWarning",
]


class FftconvError(ValueError):
    """Base class for all fftconv input errors."""


class InvalidParameterError(FftconvError):
    """
    A kernel size or shape parameter that cannot produce a usable kernel.

    Raised for non-positive sizes, near-zero denominators (e.g. sigma ~ 0)
    and weight functions that evaluate to NaN/Inf.
    """


class DimensionMismatchError(FftconvError):
    """Buffers with incompatible or empty spatial dimensions."""


class UnsupportedFormatError(FftconvError):
    """Pixel layout or sample type the channel adapter cannot map."""


class DegenerateKernelWarning(RuntimeWarning):
    """Kernel weights sum to ~0, so unit-sum normalization was skipped."""
