"""Read image files as rgba pixel arrays and sample or quantize them.

Decoding errors from Pillow (FileNotFoundError, PIL.UnidentifiedImageError, and
other OSErrors) are not caught here. Whether a bad file should end the run or be
skipped is up to the caller.

:author: Shay Hill
:created: 2026-10-18
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Annotated

import numpy as np
import numpy.typing as npt
from PIL import Image

from palette_quantizer import defaults
from palette_quantizer.quantization import (
    Method,
    Palette,
    quantize,
    validate_palette_size,
)
from palette_quantizer.samples import (
    SampleSet,
    aggregate_pixels,
    merge_sample_sets,
    validate_alpha_threshold,
)

# every pixel in an image as rgba
_RgbaPixels = Annotated[npt.NDArray[np.uint8], (-1, 4)]


def get_image_pixels(filename: Path | str) -> _RgbaPixels:
    """Get red, green, blue, and alpha levels from an image.

    :param filename: path to an image in any format Pillow can read
    :return: array with shape (-1, 4) of uint8 values, one row per pixel

    Images without an alpha channel are read as fully opaque.
    """
    with Image.open(filename) as image:
        rgba = image.convert("RGBA")
    return np.array(rgba, dtype=np.uint8).reshape(-1, 4)


def aggregate_image(
    filename: Path | str, alpha_threshold: int = defaults.ALPHA_THRESHOLD
) -> SampleSet:
    """Sample the colors in one image.

    :param filename: path to an image
    :param alpha_threshold: pixels with alpha below this value are ignored
    :return: a SampleSet for the image
    """
    logging.info(f"reading {Path(filename).name}")
    return aggregate_pixels([get_image_pixels(filename)], alpha_threshold)


def aggregate_images(
    filenames: Iterable[Path | str], alpha_threshold: int = defaults.ALPHA_THRESHOLD
) -> SampleSet:
    """Sample the colors in several images as one population.

    :param filenames: paths to images
    :param alpha_threshold: pixels with alpha below this value are ignored
    :return: one SampleSet for all images
    """
    alpha_threshold = validate_alpha_threshold(alpha_threshold)
    return merge_sample_sets(*(aggregate_image(x, alpha_threshold) for x in filenames))


def extract_image_palette(
    filenames: Iterable[Path | str],
    palette_size: int,
    *,
    alpha_threshold: int = defaults.ALPHA_THRESHOLD,
    method: Method | str = defaults.METHOD,
    sort: bool = False,
) -> Palette:
    """Quantize the colors in one or more images into one palette.

    :param filenames: paths to images
    :param palette_size: maximum number of colors. Must be positive.
    :param alpha_threshold: pixels with alpha below this value are ignored
    :param method: a Method or its value ("median-cut" or "octree")
    :param sort: if True, sort the palette by hue, saturation, then value
    :return: a Palette
    :raise InvalidPaletteSizeError: before opening any image, if palette_size is
        not a positive integer
    """
    palette_size = validate_palette_size(palette_size)
    method = Method(method)
    samples = aggregate_images(filenames, alpha_threshold)
    palette = quantize(samples, palette_size, method)
    if sort:
        return palette.sorted_by_hsv()
    return palette
