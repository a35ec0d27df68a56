# src/fftconv/conv2d/kernels.py
"""Radial convolution kernels: Identity, Gaussian, Exponential, Polynomial, Smoothify."""
from __future__ import annotations

import dataclasses
import logging
import math
import warnings
from dataclasses import dataclass
from typing import Callable, Dict, Sequence, Type, Union

import numpy as np

from fftconv.core.grids import squared_radius_grid
from fftconv.core.norms import SUM_EPSILON, sum_normalize
from fftconv.errors import DegenerateKernelWarning, InvalidParameterError

logger = logging.getLogger(__name__)

ArrayLike = np.ndarray
WeightFn = Callable[[np.ndarray], np.ndarray]

__all__ = [
    "Identity",
    "Gaussian",
    "Exponential",
    "Polynomial",
    "Smoothify",
    "KernelSpec",
    "KERNEL_FAMILIES",
    "SMOOTHIFY_LEVELS",
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
]

# Number of dyadic Gaussians summed by the Smoothify kernel.
SMOOTHIFY_LEVELS = 5


# ---------------------------------------------------------------------------
# Kernel families
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Identity:
    """1x1 kernel [1]."""


@dataclass(frozen=True)
class Gaussian:
    """exp(-l2 / (2 sigma^2))"""

    sigma: float = 1.0


@dataclass(frozen=True)
class Exponential:
    """exp(-l2^power / sigma^power)"""

    power: float = 1.0
    sigma: float = 1.0


@dataclass(frozen=True)
class Polynomial:
    """(1 - sqrt(l2) / sigma)^power inside radius sigma, 0 outside."""

    power: float = 1.0
    sigma: float = 1.0


@dataclass(frozen=True)
class Smoothify:
    """Dyadic mixture of Gaussians with a long tail."""

    sigma: float = 1.0


KernelSpec = Union[Identity, Gaussian, Exponential, Polynomial, Smoothify]

KERNEL_FAMILIES: Dict[str, Type] = {
    "identity": Identity,
    "gaussian": Gaussian,
    "exponential": Exponential,
    "polynomial": Polynomial,
    "smoothify": Smoothify,
}


# ---------------------------------------------------------------------------
# Radial synthesis
# ---------------------------------------------------------------------------

def _check_size(size: int) -> int:
    if isinstance(size, bool) or int(size) != size:
        raise InvalidParameterError(f"Kernel size must be an integer, got {size!r}")
    size = int(size)
    if size <= 0:
        raise InvalidParameterError(f"Kernel size must be positive, got {size}")
    return size


def _freeze(kernel: np.ndarray) -> np.ndarray:
    kernel.flags.writeable = False
    return kernel


def normalize_kernel(kernel: ArrayLike) -> ArrayLike:
    """
    Normalize the kernel so that all of its values sum to 1.0.

    If the raw sum is below single-precision epsilon the weights are
    returned unchanged and a :class:`DegenerateKernelWarning` is emitted.

    Parameters
    ----------
    kernel : ndarray
        Raw weights.

    Returns
    -------
    k : ndarray, float32, read-only
    """
    raw = np.asarray(kernel, dtype=np.float32)
    k, normalized = sum_normalize(raw, eps=SUM_EPSILON)
    if not normalized:
        total = float(np.sum(raw, dtype=np.float64))
        logger.warning("Kernel weight sum %.3g is below %.3g; normalization skipped", total, SUM_EPSILON)
        warnings.warn(
            f"Kernel weight sum {total:.3g} is below {SUM_EPSILON:.3g}; "
            "kernel left unnormalized.",
            DegenerateKernelWarning,
            stacklevel=2,
        )
    return _freeze(k)


def generate_radial(size: int, weight_fn: WeightFn) -> ArrayLike:
    """
    Generate a normalized kernel from a radial function.

    Parameters
    ----------
    size : int
        Pixel size of the (size x size) kernel.
    weight_fn : callable
        Maps an array of squared distances from the kernel center (pixel
        center convention, ``c + 0.5 - size / 2`` per axis) to weights of
        the same shape.

    Returns
    -------
    k : ndarray, shape (size, size), float32, read-only

    Raises
    ------
    InvalidParameterError
        If `size` is not positive or the weights are not all finite.
    """
    size = _check_size(size)
    l2 = squared_radius_grid(size)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        raw = np.asarray(weight_fn(l2), dtype=np.float64)

    if raw.shape != l2.shape:
        raise InvalidParameterError(
            f"Weight function returned shape {raw.shape}, expected {l2.shape}"
        )
    if not np.all(np.isfinite(raw)):
        raise InvalidParameterError(
            "Kernel weights are not finite; check the kernel shape parameters."
        )

    return normalize_kernel(raw.astype(np.float32))


# ---------------------------------------------------------------------------
# Weight functions
# ---------------------------------------------------------------------------

def _require_nonzero(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or abs(value) < SUM_EPSILON:
        raise InvalidParameterError(f"{name} must be a finite non-zero number, got {value!r}")
    return value


def _require_finite(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be finite, got {value!r}")
    return value


def weight_function(spec: KernelSpec) -> WeightFn:
    """
    Map a kernel family to its radial weight evaluator.

    Parameters
    ----------
    spec : Gaussian | Exponential | Polynomial | Smoothify

    Returns
    -------
    callable
        ``f(l2) -> weights``, vectorized over numpy arrays.

    Raises
    ------
    InvalidParameterError
        For parameters with a near-zero denominator, a negative Polynomial
        radius, or for Identity, which is not radial.
    """
    if isinstance(spec, Gaussian):
        sigma = _require_nonzero("sigma", spec.sigma)
        denom = 2.0 * sigma * sigma

        def _gauss(l2: np.ndarray) -> np.ndarray:
            return np.exp(-l2 / denom)

        return _gauss

    if isinstance(spec, Exponential):
        sigma = _require_nonzero("sigma", spec.sigma)
        power = _require_finite("power", spec.power)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            denom = float(np.power(sigma, power))
        if not math.isfinite(denom) or denom == 0.0:
            raise InvalidParameterError(
                f"sigma ** power is not a usable denominator for sigma={sigma!r}, power={power!r}"
            )

        def _exp(l2: np.ndarray) -> np.ndarray:
            return np.exp(-np.power(l2, power) / denom)

        return _exp

    if isinstance(spec, Polynomial):
        sigma = _require_nonzero("sigma", spec.sigma)
        power = _require_finite("power", spec.power)
        if sigma < 0.0:
            raise InvalidParameterError(f"Polynomial sigma is a radius and must be positive, got {sigma!r}")

        def _poly(l2: np.ndarray) -> np.ndarray:
            out = np.zeros_like(l2, dtype=np.float64)
            # hard cutoff at radius sigma
            inside = l2 <= sigma * sigma
            out[inside] = np.power(1.0 - np.sqrt(l2[inside]) / sigma, power)
            return out

        return _poly

    if isinstance(spec, Smoothify):
        sigma = _require_nonzero("sigma", spec.sigma)

        def _smoothify(l2: np.ndarray) -> np.ndarray:
            val = np.zeros_like(l2, dtype=np.float64)
            for k in range(1, SMOOTHIFY_LEVELS + 1):
                s = float(1 << k) * sigma
                val += np.exp(-l2 * 0.5 / (s * s)) / (s * s) / float(1 << (SMOOTHIFY_LEVELS - k))
            return val

        return _smoothify

    if isinstance(spec, Identity):
        raise InvalidParameterError("Identity kernel has no radial weight function")

    raise InvalidParameterError(f"Unknown kernel spec {spec!r}")


# ---------------------------------------------------------------------------
# Kernel builders
# ---------------------------------------------------------------------------

def generate_identity() -> ArrayLike:
    """Kernel: [1]"""
    return _freeze(np.ones((1, 1), dtype=np.float32))


def generate_kernel(spec: KernelSpec, size: int) -> ArrayLike:
    """
    Build the kernel described by `spec`.

    Identity ignores `size` and always yields the 1x1 kernel [1].
    """
    if isinstance(spec, Identity):
        return generate_identity()
    kernel = generate_radial(size, weight_function(spec))
    logger.debug("Generated %s kernel %dx%d", spec, kernel.shape[0], kernel.shape[1])
    return kernel


def generate_gauss(size: int, sigma: float) -> ArrayLike:
    """Gaussian blur kernel."""
    return generate_kernel(Gaussian(sigma=sigma), size)


def generate_exp(size: int, power: float, sigma: float) -> ArrayLike:
    """Exponential function kernel."""
    return generate_kernel(Exponential(power=power, sigma=sigma), size)


def generate_poly(size: int, power: float, sigma: float) -> ArrayLike:
    """Polynomial function kernel."""
    return generate_kernel(Polynomial(power=power, sigma=sigma), size)


def generate_smoothify(size: int, sigma: float) -> ArrayLike:
    return generate_kernel(Smoothify(sigma=sigma), size)


# ---------------------------------------------------------------------------
# Spec construction
# ---------------------------------------------------------------------------

def _family(name: str) -> Type:
    key = str(name).strip().lower()
    try:
        return KERNEL_FAMILIES[key]
    except KeyError:
        known = ", ".join(sorted(KERNEL_FAMILIES))
        raise InvalidParameterError(f"Unknown kernel family {name!r}; expected one of: {known}") from None


def kernel_spec_from_params(family: str, params: Sequence[float] = ()) -> KernelSpec:
    """
    Build a kernel spec from a family name and positional shape parameters.

    Parameters are assigned to the family's fields in order (Gaussian:
    sigma; Exponential/Polynomial: power, sigma; Smoothify: sigma). Extra
    parameters are ignored; missing ones keep the field default (1.0).
    """
    cls = _family(family)
    names = [f.name for f in dataclasses.fields(cls)]
    values = {name: float(value) for name, value in zip(names, params)}
    return cls(**values)


_KEY_ALIASES = {"σ": "sigma", "s": "sigma", "pow": "power", "p": "power"}


def parse_kernel_spec(spec: str) -> KernelSpec:
    """
    Parse strings like:
        "identity"
        "gaussian:sigma=2.0"
        "gaussian:σ=2.0"
        "exponential:pow=0.5,sigma=8"
    into a kernel spec.
    """
    if not spec or not spec.strip():
        raise InvalidParameterError("Empty kernel spec.")

    kind, _, param_str = spec.partition(":")
    cls = _family(kind)
    allowed = {f.name for f in dataclasses.fields(cls)}

    values: Dict[str, float] = {}
    for item in param_str.split(","):
        item = item.strip()
        if not item:
            continue
        key, eq, val = item.partition("=")
        if not eq:
            raise InvalidParameterError(f"Expected key=value in kernel spec, got {item!r}")
        key = key.strip().lower()
        key = _KEY_ALIASES.get(key, key)
        if key not in allowed:
            raise InvalidParameterError(f"{cls.__name__} kernel has no parameter {key!r}")
        try:
            values[key] = float(val)
        except ValueError:
            raise InvalidParameterError(f"Invalid value for {key!r}: {val!r}") from None

    return cls(**values)
