"""Convolution parameters: kernel family, size, shape parameters and edge mode."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Sequence, Tuple

import numpy as np

from fftconv.conv2d.image import EDGE_MODES
from fftconv.conv2d.kernels import KERNEL_FAMILIES, KernelSpec, generate_kernel, kernel_spec_from_params
from fftconv.errors import InvalidParameterError

logger = logging.getLogger(__name__)

MIN_KERNEL_SIZE = 1
MAX_KERNEL_SIZE = 3000
DEFAULT_PARAMS: Tuple[float, float] = (1.0, 1.0)

KERNEL_NAMES = ("Identity", "Gaussian", "Exponential", "Polynomial", "Smoothify")


def parse_params(text: str, defaults: Sequence[float] = DEFAULT_PARAMS) -> Tuple[float, ...]:
    """Parse "p0,p1" into floats; missing or unparseable entries keep their default.

    Args:
        text: Comma separated parameter list (may be empty)
        defaults: Values used where ``text`` has nothing usable

    Returns:
        Tuple with one float per default
    """
    values = list(defaults)
    for i, raw in enumerate(str(text or "").split(",")[: len(values)]):
        try:
            values[i] = float(raw)
        except ValueError:
            continue
    return tuple(values)


def clamp_kernel_size(size: int) -> int:
    """Clamp a requested kernel size into [MIN_KERNEL_SIZE, MAX_KERNEL_SIZE]."""
    return int(min(max(int(size), MIN_KERNEL_SIZE), MAX_KERNEL_SIZE))


@dataclass
class ConvolverSettings:
    """Parameters handed to the convolution core.

    ``params`` meaning depends on the family: sigma for Gaussian; power and
    sigma for Exponential/Polynomial; sigma for Smoothify (second ignored).
    """

    kernel: str = "Smoothify"
    kernel_size: int = 201
    params: Tuple[float, float] = DEFAULT_PARAMS
    edge: str = "wrap"

    @classmethod
    def from_dict(cls, data: dict) -> "ConvolverSettings":
        """Create settings from a dictionary (e.g. a loaded settings file).

        ``params`` may be a list of numbers or a "p0,p1" string.
        """
        params = data.get("params", DEFAULT_PARAMS)
        if isinstance(params, str):
            params = parse_params(params)
        else:
            params = parse_params(",".join(str(p) for p in params))
        return cls(
            kernel=str(data.get("kernel", "Smoothify")),
            kernel_size=int(data.get("kernel_size", 201)),
            params=params,
            edge=str(data.get("edge", "wrap")),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["params"] = list(self.params)
        return data

    def validate(self) -> None:
        """Validate settings.

        Raises:
            InvalidParameterError: If the family or edge mode is unknown
        """
        if self.kernel.strip().lower() not in KERNEL_FAMILIES:
            raise InvalidParameterError(
                f"Unknown kernel type {self.kernel!r}. Available types: {list(KERNEL_NAMES)}"
            )
        if self.edge not in EDGE_MODES:
            raise InvalidParameterError(f"Unknown edge mode {self.edge!r}; expected one of {EDGE_MODES}")

    @property
    def clamped_size(self) -> int:
        return clamp_kernel_size(self.kernel_size)

    def kernel_spec(self) -> KernelSpec:
        self.validate()
        return kernel_spec_from_params(self.kernel, self.params)

    def build_kernel(self) -> np.ndarray:
        """Generate the kernel these settings describe."""
        spec = self.kernel_spec()
        size = self.clamped_size
        if size != self.kernel_size:
            logger.warning(f"Kernel size {self.kernel_size} clamped to {size}")
        logger.info(f"Generating {spec} kernel of size {size}")
        return generate_kernel(spec, size)
