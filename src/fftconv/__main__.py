"""
Numerical self-check for the fftconv package.

Usage
-----
$ python -m fftconv
"""

import numpy as np

from . import __version__
from .conv2d import KERNEL_FAMILIES, convolve_channels, generate_identity, generate_kernel
from .core import forward, inverse


def _diagnostics():
    print(f"fftconv spectral convolution toolkit v{__version__}\n")
    rng = np.random.default_rng()

    print("Spectral round trip:")
    for h, w in [(8, 8), (7, 5), (1, 9)]:
        x = rng.standard_normal((h, w))
        x_rec = inverse(forward(x)) / (h * w)
        print(f"  {h}x{w}: max error {np.max(np.abs(x - x_rec.real)):.2e}")

    print("\nIdentity convolution:")
    img = rng.random((9, 6)).astype(np.float32)
    (y,) = convolve_channels([img], generate_identity())
    print(f"  max error {np.max(np.abs(y - img)):.2e}")

    print("\nKernel sums (size 15, default parameters):")
    for name, cls in KERNEL_FAMILIES.items():
        k = generate_kernel(cls(), 15)
        print(f"  {name:12s} {k.shape[0]}x{k.shape[1]}  sum={float(k.sum(dtype=np.float64)):.6f}")

    print("\nAll checks done ✅")


if __name__ == "__main__":
    _diagnostics()
