"""Reduce the colors in one or more pixel streams to a palette.

Two methods are available:

* median-cut: always returns min(palette_size, number of distinct colors) colors.
* octree: returns no more than palette_size colors, but may return fewer even when
  there are more distinct colors available.

Either way, the Palette returned reports both the requested and achieved sizes. An
achieved size below the requested size is a result, not an error.

:author: Shay Hill
:created: 2026-10-18
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Callable, Iterable, Sequence
from typing import Any

import numpy as np

from palette_quantizer import defaults
from palette_quantizer.colors import Color
from palette_quantizer.median_cut import median_cut
from palette_quantizer.octree import octree
from palette_quantizer.samples import (
    ColorSample,
    PixelsLike,
    SampleSet,
    aggregate_pixels,
    validate_alpha_threshold,
)
from palette_quantizer.sort_colors import sort_by_hsv


class InvalidPaletteSizeError(ValueError):
    """Exception raised when a palette size is not a positive integer."""

    def __init__(self, message: str = "Palette size must be positive.") -> None:
        self.message = message
        super().__init__(self.message)


class Method(enum.Enum):
    """Quantization methods."""

    MEDIAN_CUT = "median-cut"
    OCTREE = "octree"


_QUANTIZERS: dict[Method, Callable[[Sequence[ColorSample], int], list[Color]]] = {
    Method.MEDIAN_CUT: median_cut,
    Method.OCTREE: octree,
}


def validate_palette_size(palette_size: Any) -> int:
    """Return the palette size or raise an InvalidPaletteSizeError.

    :param palette_size: candidate palette size
    :return: palette_size as an int
    :raise InvalidPaletteSizeError: if palette_size is not a positive integer
    """
    if isinstance(palette_size, bool) or not isinstance(
        palette_size, (int, np.integer)
    ):
        msg = f"Palette size must be an integer, got {palette_size!r}."
        raise InvalidPaletteSizeError(msg)
    if palette_size <= 0:
        msg = f"Palette size must be positive, got {palette_size}."
        raise InvalidPaletteSizeError(msg)
    return int(palette_size)


@dataclasses.dataclass(frozen=True)
class Palette:
    """The colors found by quantization.

    colors: no more than requested_size colors in the order the quantizer emitted
        them or, if sorted, in hsv order
    requested_size: the palette size asked for
    method: the quantization method used
    """

    colors: tuple[Color, ...]
    requested_size: int
    method: Method

    def __len__(self) -> int:
        """Return the number of colors."""
        return len(self.colors)

    @property
    def achieved_size(self) -> int:
        """Return the number of colors actually found."""
        return len(self.colors)

    @property
    def is_degenerate(self) -> bool:
        """Return True if fewer colors were found than requested."""
        return self.achieved_size < self.requested_size

    def sorted_by_hsv(self) -> Palette:
        """Return a copy with colors sorted by hue, saturation, then value."""
        return dataclasses.replace(self, colors=tuple(sort_by_hsv(self.colors)))


def quantize(
    samples: SampleSet | Sequence[ColorSample],
    palette_size: int,
    method: Method | str = defaults.METHOD,
) -> Palette:
    """Quantize color samples into a palette.

    :param samples: a SampleSet or a sequence of distinct color samples
    :param palette_size: maximum number of colors. Must be positive.
    :param method: a Method or its value ("median-cut" or "octree")
    :return: a Palette
    :raise InvalidPaletteSizeError: if palette_size is not a positive integer
    :raise ValueError: if method is not a known method
    """
    palette_size = validate_palette_size(palette_size)
    method = Method(method)
    if isinstance(samples, SampleSet):
        samples = samples.samples
    colors = _QUANTIZERS[method](samples, palette_size)
    return Palette(tuple(colors), palette_size, method)


def extract_palette(
    pixel_streams: Iterable[PixelsLike],
    palette_size: int,
    *,
    alpha_threshold: int = defaults.ALPHA_THRESHOLD,
    method: Method | str = defaults.METHOD,
    sort: bool = False,
) -> Palette:
    """Aggregate pixel streams and quantize them into one palette.

    :param pixel_streams: any number of rgba pixel streams. Pixels from every
        stream are pooled.
    :param palette_size: maximum number of colors. Must be positive.
    :param alpha_threshold: pixels with alpha below this value are ignored
    :param method: a Method or its value ("median-cut" or "octree")
    :param sort: if True, sort the palette by hue, saturation, then value
    :return: a Palette
    :raise InvalidPaletteSizeError: before reading any pixels, if palette_size is
        not a positive integer
    :raise InvalidAlphaThresholdError: if alpha_threshold is not in [0, 255]
    """
    palette_size = validate_palette_size(palette_size)
    alpha_threshold = validate_alpha_threshold(alpha_threshold)
    method = Method(method)
    samples = aggregate_pixels(pixel_streams, alpha_threshold)
    palette = quantize(samples, palette_size, method)
    if sort:
        return palette.sorted_by_hsv()
    return palette
