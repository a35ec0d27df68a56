"""
Generate example outputs for the fftconv library.

Features
--------
- Scans an input folder for image files (no hard-coded names).
- If none are found, optionally calls `generate_test_assets.main()` to create
  tiny synthetic images in every supported pixel format.
- Produces, for every image:
    * one convolution per kernel family
    * one Gaussian convolution per edge mode
    * a rendering of every kernel

Outputs
-------
samples/output/examples/families/
samples/output/examples/edges/
samples/output/examples/kernels/

Run
---
python examples/generate_examples.py
"""

from __future__ import annotations

import importlib.util
from pathlib import Path
from typing import List

# ---------------------------------------------------------------------
# Locate project root (directory containing "examples")
# ---------------------------------------------------------------------
THIS_FILE = Path(__file__).resolve()
EXAMPLES_DIR = THIS_FILE.parent
PROJECT_ROOT = EXAMPLES_DIR.parent

# ---------------------------------------------------------------------
# Import asset generator from examples/generate_test_assets.py
# ---------------------------------------------------------------------
GEN_ASSETS_PATH = EXAMPLES_DIR / "generate_test_assets.py"

if GEN_ASSETS_PATH.exists():
    spec = importlib.util.spec_from_file_location("generate_test_assets", str(GEN_ASSETS_PATH))
    gen_mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(gen_mod)      # type: ignore
    generate_assets_main = gen_mod.main
else:
    generate_assets_main = None

# ---------------------------------------------------------------------
# fftconv imports
# ---------------------------------------------------------------------
from fftconv.config import ConvolverSettings, KERNEL_NAMES
from fftconv.conv2d import EDGE_MODES, PixelFormat, convolve_image, join
from fftconv.core.norms import peak_normalize
from fftconv.io import read_image, write_image, to_uint8


# ---------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------
INPUT_DIR = PROJECT_ROOT / "samples" / "input" / "test_assets"
OUTPUT_DIR = PROJECT_ROOT / "samples" / "output" / "examples"

FAMILY_OUT_DIR = OUTPUT_DIR / "families"
EDGE_OUT_DIR = OUTPUT_DIR / "edges"
KERNEL_OUT_DIR = OUTPUT_DIR / "kernels"

IMG_EXT = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp"}

KERNEL_SIZE = 21
SIGMA = 3.0


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def find_images(input_dir: Path) -> List[Path]:
    if not input_dir.exists():
        return []
    return [p for p in sorted(input_dir.iterdir()) if p.is_file() and p.suffix.lower() in IMG_EXT]


def maybe_generate_assets(input_dir: Path) -> List[Path]:
    image_files = find_images(input_dir)
    if image_files:
        return image_files

    print(f"No test assets found in: {input_dir}")
    ans = input("Generate synthetic test images now? [y/N]: ").strip().lower()
    if ans not in ("y", "yes"):
        return image_files

    if generate_assets_main is None:
        print("ERROR: Could not import generate_test_assets.py")
        return image_files

    input_dir.mkdir(parents=True, exist_ok=True)
    generate_assets_main(str(input_dir))
    return find_images(input_dir)


def _settings(name: str, edge: str = "wrap") -> ConvolverSettings:
    params = (1.0, SIGMA) if name in ("Exponential", "Polynomial") else (SIGMA, 1.0)
    return ConvolverSettings(kernel=name, kernel_size=KERNEL_SIZE, params=params, edge=edge)


# ---------------------------------------------------------------------
# Example Generators
# ---------------------------------------------------------------------

def run_family_examples(image_files: List[Path]) -> None:
    FAMILY_OUT_DIR.mkdir(parents=True, exist_ok=True)
    for path in image_files:
        img = read_image(path)
        for name in KERNEL_NAMES:
            out = convolve_image(img, _settings(name).build_kernel())
            out_path = FAMILY_OUT_DIR / f"{path.stem}_{name.lower()}.png"
            write_image(out_path, to_uint8(out))
            print(f"  {path.name} * {name} → {out_path.name}")


def run_edge_examples(image_files: List[Path]) -> None:
    EDGE_OUT_DIR.mkdir(parents=True, exist_ok=True)
    for path in image_files:
        img = read_image(path)
        for edge in EDGE_MODES:
            kernel = _settings("Gaussian", edge).build_kernel()
            out = convolve_image(img, kernel, edge=edge)
            out_path = EDGE_OUT_DIR / f"{path.stem}_{edge}.png"
            write_image(out_path, to_uint8(out))
            print(f"  {path.name} edge={edge} → {out_path.name}")


def run_kernel_renders() -> None:
    KERNEL_OUT_DIR.mkdir(parents=True, exist_ok=True)
    for name in KERNEL_NAMES:
        kernel = _settings(name).build_kernel()
        img = join([peak_normalize(kernel)], PixelFormat(1, "uint8", squeeze=True))
        write_image(KERNEL_OUT_DIR / f"kernel_{name.lower()}.png", img)


def main() -> int:
    image_files = maybe_generate_assets(INPUT_DIR)
    if not image_files:
        print("No images to process.")
        return 1

    print("Kernel families:")
    run_family_examples(image_files)
    print("Edge modes:")
    run_edge_examples(image_files)
    run_kernel_renders()
    print(f"All examples written to {OUTPUT_DIR}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
