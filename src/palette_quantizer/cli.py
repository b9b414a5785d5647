"""Command-line interface: print a palette for one or more images.

Pixels from every image are pooled into one palette unless --per-image is given,
in which case each image gets its own header and palette.

    palette-quantizer 8 photo.png logo.webp --hex --sort

:author: Shay Hill
:created: 2026-10-18
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from palette_quantizer import defaults
from palette_quantizer.formatting import (
    format_image_header,
    format_palette,
    format_summary,
)
from palette_quantizer.image_arrays import aggregate_image
from palette_quantizer.quantization import (
    InvalidPaletteSizeError,
    Method,
    quantize,
    validate_palette_size,
)
from palette_quantizer.samples import (
    InvalidAlphaThresholdError,
    SampleSet,
    merge_sample_sets,
    validate_alpha_threshold,
)

EXIT_OK = 0
EXIT_DECODE_FAILURE = 1
EXIT_USAGE = 2


def _new_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="palette-quantizer",
        description="Quantize the colors in one or more images to a palette.",
    )
    parser.add_argument(
        "palette_size", type=int, help="maximum number of colors in the palette"
    )
    parser.add_argument("paths", nargs="+", help="image files to sample")
    parser.add_argument("--rgb", action="store_true", help="show decimal channels")
    parser.add_argument("--hex", action="store_true", help="show hex strings")
    parser.add_argument(
        "--uncolored", action="store_true", help="do not color the output text"
    )
    parser.add_argument(
        "--sort", action="store_true", help="sort by hue, saturation, then value"
    )
    parser.add_argument(
        "--alpha-thresh",
        type=int,
        default=defaults.ALPHA_THRESHOLD,
        help="ignore pixels with alpha below this value [0, 255]",
    )
    parser.add_argument(
        "--method",
        choices=[x.value for x in Method],
        default=defaults.METHOD,
        help="quantization method",
    )
    parser.add_argument(
        "--per-image",
        action="store_true",
        help="print a separate palette for each image instead of pooling them",
    )
    parser.add_argument(
        "--skip-unreadable",
        action="store_true",
        help="warn about and skip images that cannot be read instead of stopping",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log progress")
    return parser


def _aggregate_paths(
    paths: Sequence[str], alpha_threshold: int, *, skip: bool
) -> SampleSet:
    """Sample every readable image.

    :raise OSError: if an image cannot be read and skip is False
    """
    sample_sets: list[SampleSet] = []
    for path in paths:
        try:
            sample_sets.append(aggregate_image(path, alpha_threshold))
        except OSError as e:
            if not skip:
                raise
            logging.warning(f"skipping {path}: {e}")
    return merge_sample_sets(*sample_sets)


def _print_palette(
    samples: SampleSet, palette_size: int, args: argparse.Namespace
) -> None:
    """Quantize samples and print the summary line and one line per color."""
    palette = quantize(samples, palette_size, args.method)
    if args.sort:
        palette = palette.sorted_by_hsv()
    print(format_summary(palette))
    for line in format_palette(
        palette, rgb=args.rgb, hex_=args.hex, colored=not args.uncolored
    ):
        print(line)


def _print_per_image(
    palette_size: int, alpha_threshold: int, args: argparse.Namespace
) -> None:
    """Print a header and a separate palette for each image.

    :raise OSError: if an image cannot be read and args.skip_unreadable is False
    """
    for number, path in enumerate(args.paths, start=1):
        print(format_image_header(number, path, colored=not args.uncolored))
        try:
            samples = aggregate_image(path, alpha_threshold)
        except OSError as e:
            if not args.skip_unreadable:
                raise
            logging.warning(f"skipping {path}: {e}")
        else:
            _print_palette(samples, palette_size, args)
        print()


def main(argv: Sequence[str] | None = None) -> int:
    """Print a palette for the images named in argv.

    :param argv: command-line arguments without the program name. Defaults to
        sys.argv[1:].
    :return: exit status
    """
    args = _new_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )
    try:
        palette_size = validate_palette_size(args.palette_size)
        alpha_threshold = validate_alpha_threshold(args.alpha_thresh)
    except (InvalidPaletteSizeError, InvalidAlphaThresholdError) as e:
        logging.error(e.message)
        return EXIT_USAGE

    try:
        if args.per_image:
            _print_per_image(palette_size, alpha_threshold, args)
        else:
            samples = _aggregate_paths(
                args.paths, alpha_threshold, skip=args.skip_unreadable
            )
            _print_palette(samples, palette_size, args)
    except OSError as e:
        logging.error(f"cannot read image: {e}")
        return EXIT_DECODE_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
