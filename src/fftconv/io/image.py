# fftconv/io/image.py
"""
Image I/O utilities.

Pillow handles the common 8-bit formats and 16-bit gray, tifffile reads and
writes TIFF in any sample type, and OpenCV covers 16-bit colour PNG, which
Pillow truncates to 8 bits.

Images are exchanged as numpy arrays in their native sample type
(uint8, uint16 or float32) so the channel adapter can normalize them.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np
import tifffile
from PIL import Image

from fftconv.conv2d.channels import PixelFormat, join, split
from fftconv.errors import UnsupportedFormatError

logger = logging.getLogger(__name__)

ArrayLike = np.ndarray
PathLike = Union[str, Path]

__all__ = [
    "read_image",
    "write_image",
    "to_uint8",
]

_NATIVE_MODES = {"L", "LA", "RGB", "RGBA", "F"}
_UINT16_MODES = {"I;16", "I;16L", "I;16B", "I;16N"}
_TIFF_SUFFIXES = {".tif", ".tiff"}
# Pillow opens these 16-bit PNG layouts as 8-bit modes
_WIDE_COLOUR_MODES = {"LA", "RGB", "RGBA"}


def _pathify(path: PathLike) -> str:
    return str(Path(path))


def _is_tiff(path: PathLike) -> bool:
    return Path(path).suffix.lower() in _TIFF_SUFFIXES


def _supported_mode(im: Image.Image) -> Image.Image:
    """Convert exotic Pillow modes to one the channel adapter understands."""
    mode = im.mode
    if mode in _NATIVE_MODES or mode in _UINT16_MODES or mode == "I":
        return im
    if mode == "1":
        return im.convert("L")
    if mode in ("P", "PA"):
        has_alpha = mode == "PA" or "transparency" in im.info
        return im.convert("RGBA" if has_alpha else "RGB")
    if mode == "La":
        return im.convert("LA")
    if mode == "RGBa":
        return im.convert("RGBA")
    # CMYK, YCbCr, LAB, HSV, ...
    return im.convert("RGB")


def _has_16bit_colour(im: Image.Image) -> bool:
    """True when Pillow would decode 16-bit colour samples down to 8 bits."""
    if im.mode not in _WIDE_COLOUR_MODES:
        return False
    # the rawmode (e.g. "RGB;16B") is only visible before the image is loaded
    return any(";16" in str(tile[3]) for tile in im.tile)


def _native_dtype(arr: np.ndarray, source: str) -> np.ndarray:
    """Map decoded samples onto uint8, uint16 or float32."""
    if arr.dtype == np.bool_:
        return arr.astype(np.uint8) * np.uint8(255)
    if arr.dtype in (np.uint8, np.uint16, np.float32):
        return arr
    if np.issubdtype(arr.dtype, np.floating):
        return arr.astype(np.float32)
    if np.issubdtype(arr.dtype, np.integer):
        return np.clip(arr, 0, np.iinfo(np.uint16).max).astype(np.uint16)
    raise UnsupportedFormatError(f"Unsupported sample type {arr.dtype} in {source}")


def _read_tiff(p: str) -> np.ndarray:
    arr = tifffile.imread(p)
    # planar (separate) samples come back channel-first
    if arr.ndim == 3 and arr.shape[0] <= 4 < arr.shape[2]:
        arr = np.moveaxis(arr, 0, -1)
    if arr.ndim == 3 and arr.shape[2] == 1:
        arr = arr[..., 0]
    if arr.ndim not in (2, 3) or (arr.ndim == 3 and arr.shape[2] > 4):
        raise UnsupportedFormatError(f"Unsupported TIFF layout {arr.shape} in {p}")
    return _native_dtype(arr, p)


def _read_wide_png(p: str, mode: str) -> np.ndarray:
    arr = cv2.imread(p, cv2.IMREAD_UNCHANGED)
    if arr is None:
        raise OSError(f"OpenCV could not decode {p}")
    if arr.ndim == 2:
        return arr
    if mode == "LA":
        return arr[..., [0, 3]] if arr.shape[2] == 4 else arr
    if arr.shape[2] == 4:
        return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(arr, cv2.COLOR_BGR2RGB)


def read_image(path: PathLike, *, mode: str = "keep") -> np.ndarray:
    """
    Read an image.

    Parameters
    ----------
    path : str or Path
        Input image path.
    mode : str, default="keep"
        - "keep": use the file's native sample type and layout (8-bit or
          16-bit L/LA/RGB/RGBA, float TIFF).
        - otherwise: convert via Pillow's .convert(mode) first.

    Returns
    -------
    img : ndarray
        2D for single-channel images, (H, W, C) otherwise; dtype uint8,
        uint16 or float32.
    """
    p = _pathify(path)

    if mode == "keep" and _is_tiff(p):
        arr = _read_tiff(p)
        logger.debug("Read %s via tifffile: shape=%s dtype=%s", p, arr.shape, arr.dtype)
        return arr

    with Image.open(p) as im:
        if mode == "keep" and _has_16bit_colour(im):
            img_mode = im.mode
            arr = None
        else:
            if mode != "keep":
                im = im.convert(mode)
            im = _supported_mode(im)
            img_mode = im.mode
            arr = np.asarray(im)

    if arr is None:
        arr = _read_wide_png(p, img_mode)
        logger.debug("Read %s via OpenCV: mode=%s;16 shape=%s", p, img_mode, arr.shape)
        return arr.astype(np.uint16, copy=False)

    if img_mode in _UINT16_MODES:
        arr = arr.astype(np.uint16)
    elif img_mode == "I":
        arr = np.clip(arr, 0, np.iinfo(np.uint16).max).astype(np.uint16)
    elif img_mode == "F":
        arr = arr.astype(np.float32)

    logger.debug("Read %s: mode=%s shape=%s dtype=%s", p, img_mode, arr.shape, arr.dtype)
    return arr


def to_uint8(x: ArrayLike) -> np.ndarray:
    """
    Convert an image array to uint8 through the channel adapter
    (normalize by the source range, clamp, round).
    """
    channels, fmt = split(x)
    return join(channels, PixelFormat(fmt.channels, np.uint8, fmt.squeeze))


def _write_tiff(out_path: Path, arr: np.ndarray) -> None:
    if np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(np.float32)
    elif arr.dtype not in (np.uint8, np.uint16):
        arr = to_uint8(arr)
    photometric = "rgb" if arr.ndim == 3 and arr.shape[2] in (3, 4) else "minisblack"
    kwargs = {"planarconfig": "contig"} if arr.ndim == 3 else {}
    tifffile.imwrite(_pathify(out_path), np.ascontiguousarray(arr), photometric=photometric, **kwargs)


def _write_wide_png(out_path: Path, arr: np.ndarray) -> None:
    code = cv2.COLOR_RGBA2BGRA if arr.shape[2] == 4 else cv2.COLOR_RGB2BGR
    bgr = cv2.cvtColor(np.ascontiguousarray(arr), code)
    if not cv2.imwrite(_pathify(out_path), bgr):
        raise OSError(f"OpenCV could not write {out_path}")


def write_image(path: PathLike, data: ArrayLike) -> None:
    """
    Save an image, keeping the sample type where the format allows.

    - TIFF: any layout, uint8 / uint16 / float32 samples (tifffile).
    - uint8: any layout (L, LA, RGB, RGBA) in any Pillow format.
    - uint16: gray through Pillow, RGB / RGBA to PNG through OpenCV.

    Anything else is converted to uint8 with a warning.

    Parameters
    ----------
    path : str or Path
        Output file path (extension decides format).
    data : ndarray
        Image data, 2D or 3D with 1..4 channels.
    """
    arr = np.asarray(data)

    if arr.ndim == 3 and arr.shape[2] == 1:
        arr = arr[..., 0]
    if arr.ndim not in (2, 3) or (arr.ndim == 3 and arr.shape[2] > 4):
        raise UnsupportedFormatError(f"Expected 2D or 3D array with 1..4 channels, got {arr.shape}")

    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    gray = arr.ndim == 2

    if _is_tiff(out_path):
        _write_tiff(out_path, arr)
        return

    if arr.dtype == np.uint16 and not gray and arr.shape[2] in (3, 4) and out_path.suffix.lower() == ".png":
        _write_wide_png(out_path, arr)
        return

    if arr.dtype == np.uint8:
        out = arr
    elif arr.dtype == np.uint16 and gray:
        out = arr
    else:
        logger.warning(
            "Cannot store %s samples with shape %s in %s; saving as 8-bit",
            arr.dtype, arr.shape, out_path.name,
        )
        out = to_uint8(arr)

    img = Image.fromarray(np.ascontiguousarray(out))
    img.save(_pathify(out_path))
