# src/fftconv/cli/image_demo.py
"""Command-line demo: convolve one image with every kernel family.
Usage:
    python -m fftconv.cli.image_demo INPUT_PATH OUTPUT_DIR [OPTIONS...]
Saves results to OUTPUT_DIR/<edge>/<base>_<family>.png
"""
import logging
import os

import click
import imageio.v3 as iio

from fftconv.cli.convolver_cli import setup_logging
from fftconv.config import ConvolverSettings, KERNEL_NAMES
from fftconv.conv2d.image import EDGE_MODES, convolve_image
from fftconv.io import read_image, to_uint8


@click.command()
@click.argument("input_path")
@click.argument("output_dir")
@click.option("--size", default=31, show_default=True, help="Kernel size in pixels.")
@click.option("--sigma", default=4.0, show_default=True, help="Sigma for every family.")
@click.option("--power", default=1.0, show_default=True, help="Power for Exponential and Polynomial.")
@click.option("--edge", default="wrap", type=click.Choice(list(EDGE_MODES)), show_default=True)
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging.")
def main(input_path, output_dir, size, sigma, power, edge, verbose):
    setup_logging(logging.DEBUG if verbose else logging.INFO)

    img = read_image(input_path)

    # Output structure:  output_dir/<edge>/<base>_<family>.png
    edge_dir = os.path.join(output_dir, edge)
    os.makedirs(edge_dir, exist_ok=True)

    base = os.path.splitext(os.path.basename(input_path))[0]

    for name in KERNEL_NAMES:
        if name in ("Exponential", "Polynomial"):
            params = (power, sigma)
        else:
            params = (sigma, 1.0)
        settings = ConvolverSettings(kernel=name, kernel_size=size, params=params, edge=edge)
        out = convolve_image(img, settings.build_kernel(), edge=edge)

        out_path = os.path.join(edge_dir, f"{base}_{name.lower()}.png")
        iio.imwrite(out_path, to_uint8(out))
        click.echo(f"Saved {name} convolution → {out_path}")

    click.echo(f"All results stored in: {edge_dir}")


if __name__ == "__main__":
    main()
