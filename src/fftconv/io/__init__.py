"""
fftconv.io
==========

Image read/write helpers (Pillow, tifffile, OpenCV). Images cross this
boundary as numpy arrays in their native sample type.

Submodules:
- fftconv.io.image
"""

from .image import (
    read_image,
    write_image,
    to_uint8,
)

__all__ = [
    "read_image",
    "write_image",
    "to_uint8",
]
