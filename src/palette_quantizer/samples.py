"""Aggregate pixels into frequency-weighted color samples.

A pixel stream is anything that can be viewed as an array of RGBA values: a decoded
(rows, cols, 4) image array, an (n, 4) array, or an iterable of 4-tuples. Every pixel
with an alpha value at or above the alpha threshold is counted under its RGB value.
Alpha is discarded after filtering, so (1, 2, 3, 200) and (1, 2, 3, 255) are one
sample with a count of 2.

Aggregation does not care about pixel order or about how pixels are split between
streams. The same multiset of pixels will always produce the same SampleSet, and
SampleSets from separate streams can be merged after the fact.

:author: Shay Hill
:created: 2026-10-18
"""

from __future__ import annotations

import dataclasses
import functools as ft
import logging
from collections.abc import Iterable, Sequence
from typing import Annotated, Any, TypeAlias

import numpy as np
from numpy import typing as npt

from palette_quantizer.colors import Color
from palette_quantizer.constants import CHANNEL_MAX, RGBA_CHANNELS
from palette_quantizer.defaults import ALPHA_THRESHOLD

_RGBA: TypeAlias = tuple[int, int, int, int]
_Pixels: TypeAlias = Annotated[npt.NDArray[np.uint8], "(n,4)"]
PixelsLike: TypeAlias = (
    npt.NDArray[np.integer[Any]] | Iterable[_RGBA] | Iterable[Color]
)

# (m, 3) unique colors and (m,) counts as int64 so sums over large images do not
# overflow.
_Colors: TypeAlias = Annotated[npt.NDArray[np.int64], "(m,3)"]
_Counts: TypeAlias = Annotated[npt.NDArray[np.int64], "(m,)"]


class InvalidAlphaThresholdError(ValueError):
    """Exception raised when an alpha threshold is not an 8-bit value."""

    def __init__(self, message: str = "Alpha threshold must be in [0, 255].") -> None:
        self.message = message
        super().__init__(self.message)


def validate_alpha_threshold(alpha_threshold: Any) -> int:
    """Return the alpha threshold or raise an InvalidAlphaThresholdError.

    :param alpha_threshold: candidate threshold
    :return: alpha_threshold as an int
    :raise InvalidAlphaThresholdError: if alpha_threshold is not an integer in
        [0, 255]
    """
    if isinstance(alpha_threshold, bool) or not isinstance(
        alpha_threshold, (int, np.integer)
    ):
        msg = f"Alpha threshold must be an integer, got {alpha_threshold!r}."
        raise InvalidAlphaThresholdError(msg)
    if not 0 <= alpha_threshold <= CHANNEL_MAX:
        msg = f"Alpha threshold must be in [0, {CHANNEL_MAX}], got {alpha_threshold}."
        raise InvalidAlphaThresholdError(msg)
    return int(alpha_threshold)


@dataclasses.dataclass(frozen=True)
class ColorSample:
    """One distinct RGB color and the number of pixels that share it.

    :param color: an opaque Color
    :param count: number of source pixels with this exact RGB value
    """

    color: Color
    count: int

    def __post_init__(self) -> None:
        """Require a positive count. A sample with no pixels is not a sample."""
        if self.count <= 0:
            msg = f"ColorSample count must be positive, got {self.count}"
            raise ValueError(msg)


@dataclasses.dataclass(frozen=True)
class SampleSet:
    """The result of aggregating one or more pixel streams.

    samples: one ColorSample per distinct RGB value, sorted by RGB value
    scanned_count: the number of pixels read
    filtered_count: the number of pixels discarded because their alpha values were
        below the alpha threshold

    The sum of sample counts plus filtered_count is always scanned_count.
    """

    samples: tuple[ColorSample, ...] = ()
    scanned_count: int = 0
    filtered_count: int = 0

    def __len__(self) -> int:
        """Return the number of distinct colors."""
        return len(self.samples)

    @ft.cached_property
    def population(self) -> int:
        """Count the pixels represented by samples."""
        return sum(s.count for s in self.samples)


def samples_to_arrays(samples: Sequence[ColorSample]) -> tuple[_Colors, _Counts]:
    """Split samples into a color array and a count array.

    :param samples: color samples
    :return: a (m, 3) int64 array of rgb values and a (m,) int64 array of counts
    """
    colors = np.array([s.color.rgb for s in samples], dtype=np.int64).reshape(-1, 3)
    counts = np.array([s.count for s in samples], dtype=np.int64)
    return colors, counts


def _as_pixel_array(pixels: PixelsLike) -> _Pixels:
    """View any supported pixel stream as an (n, 4) uint8 array.

    :param pixels: a (..., 4) integer array or an iterable of rgba tuples or Colors
    :return: (n, 4) array of rgba values
    :raise ValueError: if the stream cannot be read as rgba pixels or a channel
        value does not fit in 8 bits
    """
    if not isinstance(pixels, np.ndarray):
        pixels = np.array([tuple(x) for x in pixels], dtype=np.int64)
    if pixels.size == 0:
        return np.empty((0, RGBA_CHANNELS), dtype=np.uint8)
    if pixels.shape[-1] != RGBA_CHANNELS:
        msg = f"Expected rgba pixels, got an array with shape {pixels.shape}."
        raise ValueError(msg)
    if pixels.dtype != np.uint8:
        low, high = int(pixels.min()), int(pixels.max())
        if low < 0 or high > CHANNEL_MAX:
            msg = f"Expected channel values in [0, {CHANNEL_MAX}], "
            msg += f"got values in [{low}, {high}]."
            raise ValueError(msg)
    return pixels.reshape(-1, RGBA_CHANNELS).astype(np.uint8, copy=False)


def _count_pixels(
    pixels: _Pixels, alpha_threshold: int
) -> tuple[dict[tuple[int, int, int], int], int]:
    """Count each rgb value in a pixel array.

    :param pixels: (n, 4) array of rgba values
    :param alpha_threshold: minimum alpha value for a pixel to be counted
    :return: a dict mapping rgb tuples to counts and the number of pixels filtered
        out by the alpha threshold
    """
    is_kept = pixels[:, 3] >= alpha_threshold
    filtered_count = len(pixels) - int(np.count_nonzero(is_kept))
    if filtered_count == len(pixels):
        return {}, filtered_count
    unique_rgbs, counts = np.unique(pixels[is_kept, :3], axis=0, return_counts=True)
    rgb_to_count = {
        (r, g, b): n for (r, g, b), n in zip(unique_rgbs.tolist(), counts.tolist())
    }
    return rgb_to_count, filtered_count


def _new_sample_set(
    rgb_to_count: dict[tuple[int, int, int], int],
    scanned_count: int,
    filtered_count: int,
) -> SampleSet:
    """Sort accumulated counts into a SampleSet."""
    samples = tuple(
        ColorSample(Color(*rgb), count) for rgb, count in sorted(rgb_to_count.items())
    )
    return SampleSet(samples, scanned_count, filtered_count)


def aggregate_pixels(
    pixel_streams: Iterable[PixelsLike], alpha_threshold: int = ALPHA_THRESHOLD
) -> SampleSet:
    """Deduplicate pixels from one or more streams into weighted color samples.

    :param pixel_streams: an iterable of pixel streams, each a (..., 4) uint8 array
        or an iterable of (r, g, b, a) tuples
    :param alpha_threshold: pixels with alpha below this value are not sampled
    :return: a SampleSet with one sample per distinct rgb value
    :raise InvalidAlphaThresholdError: if alpha_threshold is not in [0, 255]
    """
    alpha_threshold = validate_alpha_threshold(alpha_threshold)
    rgb_to_count: dict[tuple[int, int, int], int] = {}
    scanned_count = 0
    filtered_count = 0
    for stream in pixel_streams:
        pixels = _as_pixel_array(stream)
        stream_counts, stream_filtered = _count_pixels(pixels, alpha_threshold)
        for rgb, count in stream_counts.items():
            rgb_to_count[rgb] = rgb_to_count.get(rgb, 0) + count
        scanned_count += len(pixels)
        filtered_count += stream_filtered

    sample_set = _new_sample_set(rgb_to_count, scanned_count, filtered_count)
    logging.info(
        f"sampled {len(sample_set)} distinct colors from {scanned_count} pixels "
        + f"({filtered_count} below alpha threshold {alpha_threshold})"
    )
    return sample_set


def merge_sample_sets(*sample_sets: SampleSet) -> SampleSet:
    """Combine sample sets aggregated separately.

    :param sample_sets: any number of SampleSet instances
    :return: one SampleSet as if every source pixel had been aggregated at once

    Only meaningful if all sample sets were aggregated with the same alpha
    threshold.
    """
    rgb_to_count: dict[tuple[int, int, int], int] = {}
    for sample_set in sample_sets:
        for sample in sample_set.samples:
            rgb = sample.color.rgb
            rgb_to_count[rgb] = rgb_to_count.get(rgb, 0) + sample.count
    scanned_count = sum(s.scanned_count for s in sample_sets)
    filtered_count = sum(s.filtered_count for s in sample_sets)
    return _new_sample_set(rgb_to_count, scanned_count, filtered_count)
