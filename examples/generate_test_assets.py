"""
generate_test_assets.py

Creates tiny synthetic image assets for testing fftconv, one per supported
pixel format:
 - img_checker.png          8-bit gray
 - img_checker_alpha.png    8-bit gray + alpha
 - img_gradients.png        8-bit RGB
 - img_gradients_rgba.png   8-bit RGBA
 - img_radial16.png        16-bit gray
 - img_gradients16.png     16-bit RGB
 - img_radial_float.tif    32-bit float gray
 - img_gradients_float.tif 32-bit float RGB
"""

from pathlib import Path

import cv2
import numpy as np
import tifffile
from PIL import Image


# ------------------------------
# Image generator: checkerboard
# ------------------------------
def generate_checkerboard(W=64, H=48, tiles=8):
    x = np.arange(W)
    y = np.arange(H)
    xx, yy = np.meshgrid(x, y)
    board = ((xx // max(1, W // tiles) + yy // max(1, H // tiles)) % 2) * 255
    return board.astype(np.uint8)


# ------------------------------
# Image generator: gradients
# ------------------------------
def generate_gradients(W=64, H=48):
    x = np.linspace(0, 255, W, dtype=np.float32)
    y = np.linspace(0, 255, H, dtype=np.float32)
    xx, yy = np.meshgrid(x, y)

    img = np.stack(
        [
            xx,          # Red   = horizontal gradient
            yy,          # Green = vertical gradient
            (xx + yy) / 2.0,  # Blue  = diagonal blend
        ],
        axis=-1,
    )

    return img.astype(np.uint8)


# ------------------------------
# Image generator: radial falloff in [0, 1]
# ------------------------------
def generate_radial(W=64, H=48):
    x = np.linspace(-1.0, 1.0, W, dtype=np.float32)
    y = np.linspace(-1.0, 1.0, H, dtype=np.float32)
    xx, yy = np.meshgrid(x, y)
    r = np.sqrt(xx**2 + yy**2)
    return (1.0 - np.clip(r, 0.0, 1.0)).astype(np.float32)


# ------------------------------
# Main runner
# ------------------------------
def main(out_folder="samples/input/test_assets"):
    out = Path(out_folder)
    out.mkdir(parents=True, exist_ok=True)

    checker = generate_checkerboard()
    gradients = generate_gradients()
    radial = generate_radial()

    # alpha: opaque disc on transparent background
    alpha = (radial > 0.0).astype(np.uint8) * 255

    print("Generating images...")
    Image.fromarray(checker).save(out / "img_checker.png")
    Image.fromarray(np.stack([checker, alpha], axis=-1)).save(out / "img_checker_alpha.png")
    Image.fromarray(gradients).save(out / "img_gradients.png")
    Image.fromarray(np.dstack([gradients, alpha])).save(out / "img_gradients_rgba.png")
    Image.fromarray(np.round(radial * 65535.0).astype(np.uint16)).save(out / "img_radial16.png")
    Image.fromarray(radial).save(out / "img_radial_float.tif")

    # Pillow cannot write 16-bit or float colour
    gradients16 = gradients.astype(np.uint16) * 257
    cv2.imwrite(str(out / "img_gradients16.png"), np.ascontiguousarray(gradients16[..., ::-1]))
    tifffile.imwrite(out / "img_gradients_float.tif", gradients.astype(np.float32) / 255.0, photometric="rgb")

    print(f"Done. Assets written to: {out.resolve()}")


if __name__ == "__main__":
    main()
