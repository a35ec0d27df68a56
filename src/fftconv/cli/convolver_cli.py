from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import numpy as np

from fftconv import __version__
from fftconv.cli.settings import (
    add_settings_args,
    strip_settings_args,
    detect_command,
    load_settings,
    select_settings,
    apply_settings_to_parser,
    serialize_args,
    save_settings,
    find_subparser,
)
from fftconv.config import (
    KERNEL_NAMES,
    MAX_KERNEL_SIZE,
    MIN_KERNEL_SIZE,
    ConvolverSettings,
    parse_params,
)
from fftconv.conv2d import EDGE_MODES, PixelFormat, convolve_image, join
from fftconv.core.norms import peak_normalize
from fftconv.errors import FftconvError
from fftconv.io import read_image, write_image

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging for the command line tools."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _path(p: str | Path) -> Path:
    return Path(p).expanduser().resolve()


def _settings_from_args(args: argparse.Namespace) -> ConvolverSettings:
    settings = ConvolverSettings(
        kernel=args.kernel,
        kernel_size=args.kernel_size,
        params=parse_params(args.params),
        edge=getattr(args, "edge", "wrap"),
    )
    settings.validate()
    return settings


# ---------------------------------------------------------------------------
# Subcommand implementations
# ---------------------------------------------------------------------------

def _cmd_convolve(args: argparse.Namespace) -> int:
    in_path = _path(args.input)
    out_path = _path(args.output)

    settings = _settings_from_args(args)
    kernel = settings.build_kernel()

    try:
        img = read_image(in_path)
    except OSError as exc:
        raise SystemExit(f"Failed to open input image {in_path}: {exc}") from None

    logger.info(f"Convolving {in_path.name} {img.shape} {img.dtype} (edge={settings.edge})")
    out = convolve_image(img, kernel, edge=settings.edge)

    try:
        write_image(out_path, out)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Failed to save output image {out_path}: {exc}") from None

    logger.info(f"Saved {out_path}")
    return 0


def _cmd_kernel(args: argparse.Namespace) -> int:
    out_path = _path(args.output)

    settings = _settings_from_args(args)
    kernel = settings.build_kernel()

    # peak-normalized so the kernel shape is visible regardless of its sum
    dtype = np.uint16 if args.depth == 16 else np.uint8
    img = join([peak_normalize(kernel)], PixelFormat(1, dtype, squeeze=True))

    try:
        write_image(out_path, img)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Failed to save kernel image {out_path}: {exc}") from None

    logger.info(f"Saved {kernel.shape[0]}x{kernel.shape[1]} kernel (sum={float(kernel.sum()):.6f}) to {out_path}")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _add_kernel_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-k",
        "--kernel",
        default="Smoothify",
        metavar="KERNEL",
        help=f"Kernel type. Available types: {', '.join(KERNEL_NAMES)}.",
    )
    parser.add_argument(
        "-s",
        "--kernel-size",
        dest="kernel_size",
        type=int,
        default=201,
        metavar="SIZE",
        help=f"Pixel size for the kernel (clamped to {MIN_KERNEL_SIZE}..{MAX_KERNEL_SIZE}).",
    )
    parser.add_argument(
        "-p",
        "--params",
        default="",
        metavar="PARAMS",
        help=(
            "Kernel parameters 'p0,p1' (default 1.0 each): sigma for Gaussian "
            "and Smoothify; power,sigma for Exponential and Polynomial."
        ),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fftconv",
        description="Convolve images with radial kernels in the frequency domain.",
    )
    add_settings_args(parser)
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- convolve ----
    p_conv = subparsers.add_parser(
        "convolve",
        help="Convolve an image with a generated kernel.",
    )
    add_settings_args(p_conv)
    p_conv.add_argument(
        "-i",
        "--input",
        required=True,
        metavar="FILE",
        help="Input image filename.",
    )
    p_conv.add_argument(
        "-o",
        "--output",
        default="Output.png",
        metavar="FILE",
        help="Output image filename.",
    )
    _add_kernel_args(p_conv)
    p_conv.add_argument(
        "--edge",
        choices=list(EDGE_MODES),
        default="wrap",
        help="Border handling: wrap around (circular), clamp to edge pixels, or zero padding.",
    )
    p_conv.set_defaults(func=_cmd_convolve)

    # ---- kernel ----
    p_kern = subparsers.add_parser(
        "kernel",
        help="Render the generated kernel as a grayscale image.",
    )
    add_settings_args(p_kern)
    p_kern.add_argument(
        "-o",
        "--output",
        required=True,
        metavar="FILE",
        help="Output image filename.",
    )
    _add_kernel_args(p_kern)
    p_kern.add_argument(
        "--depth",
        type=int,
        choices=[8, 16],
        default=8,
        help="Bits per sample of the rendered kernel.",
    )
    p_kern.set_defaults(func=_cmd_kernel)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    cleaned_argv, settings_path, save_path = strip_settings_args(raw_argv)
    command = detect_command(cleaned_argv)

    if settings_path:
        settings_data = load_settings(Path(settings_path))
        settings = select_settings(settings_data, command)
        target = find_subparser(parser, command) or parser
        apply_settings_to_parser(target, settings)

    args = parser.parse_args(cleaned_argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    if save_path:
        cmd = getattr(args, "command", command)
        target = find_subparser(parser, cmd) or parser
        exclude = {"settings_path", "save_settings_path", "command", "func"}
        settings_out = serialize_args(args, target, exclude=exclude)
        save_settings(Path(save_path), settings_out, command=cmd)

    try:
        return args.func(args)
    except FftconvError as exc:
        raise SystemExit(f"error: {exc}") from None


if __name__ == "__main__":
    raise SystemExit(main())
