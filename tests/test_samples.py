"""Test pixel aggregation.

:author: Shay Hill
:created: 2026-10-18
"""

import random

import numpy as np
import pytest

from palette_quantizer.colors import Color
from palette_quantizer.samples import (
    ColorSample,
    InvalidAlphaThresholdError,
    PixelsLike,
    SampleSet,
    aggregate_pixels,
    merge_sample_sets,
    samples_to_arrays,
    validate_alpha_threshold,
)


def _random_pixels(num: int) -> list[tuple[int, int, int, int]]:
    """Return pixels from a small palette so there are repeats."""
    channels = (0, 64, 255)
    return [
        (
            random.choice(channels),
            random.choice(channels),
            random.choice(channels),
            random.randint(0, 255),
        )
        for _ in range(num)
    ]


class TestAggregatePixels:
    def test_deduplicate(self) -> None:
        """Count each rgb value once with a count of its pixels."""
        pixels = [(0, 0, 0, 255), (0, 0, 0, 255), (255, 255, 255, 255)]
        sample_set = aggregate_pixels([pixels])
        assert sample_set.samples == (
            ColorSample(Color(0, 0, 0), 2),
            ColorSample(Color(255, 255, 255), 1),
        )

    def test_alpha_stripped(self) -> None:
        """Pixels that differ only in alpha are one sample."""
        pixels = [(1, 2, 3, 100), (1, 2, 3, 255)]
        sample_set = aggregate_pixels([pixels])
        assert sample_set.samples == (ColorSample(Color(1, 2, 3), 2),)

    def test_alpha_threshold_inclusive(self) -> None:
        """Keep pixels with alpha equal to the threshold."""
        pixels = [(1, 2, 3, 99), (4, 5, 6, 100)]
        sample_set = aggregate_pixels([pixels], alpha_threshold=100)
        assert sample_set.samples == (ColorSample(Color(4, 5, 6), 1),)
        assert sample_set.filtered_count == 1
        assert sample_set.scanned_count == 2

    def test_only_pixel_filtered(self) -> None:
        """Return an empty sample set when every pixel is filtered out."""
        sample_set = aggregate_pixels([[(9, 9, 9, 10)]], alpha_threshold=255)
        assert sample_set.samples == ()
        assert sample_set.population == 0
        assert sample_set.filtered_count == 1

    def test_default_threshold_admits_transparent(self) -> None:
        """Threshold 0 keeps fully transparent pixels."""
        sample_set = aggregate_pixels([[(9, 9, 9, 0)]])
        assert sample_set.samples == (ColorSample(Color(9, 9, 9), 1),)

    def test_image_shaped_array(self) -> None:
        """Accept a (rows, cols, 4) array."""
        pixels = np.zeros((2, 3, 4), dtype=np.uint8)
        pixels[..., 3] = 255
        pixels[0, 0] = (5, 5, 5, 255)
        sample_set = aggregate_pixels([pixels])
        assert sample_set.samples == (
            ColorSample(Color(0, 0, 0), 5),
            ColorSample(Color(5, 5, 5), 1),
        )

    def test_multiple_streams(self) -> None:
        """Counts accumulate across streams."""
        red = [(255, 0, 0, 255)] * 3
        blue = [(0, 0, 255, 255)] * 2
        sample_set = aggregate_pixels([red, blue, red])
        assert sample_set.samples == (
            ColorSample(Color(0, 0, 255), 2),
            ColorSample(Color(255, 0, 0), 6),
        )

    def test_empty_streams(self) -> None:
        """No streams or empty streams produce an empty sample set."""
        assert aggregate_pixels([]) == SampleSet()
        assert aggregate_pixels([[], np.empty((0, 4), dtype=np.uint8)]) == SampleSet()

    def test_not_rgba(self) -> None:
        """Raise a ValueError for pixels without four channels."""
        with pytest.raises(ValueError):
            _ = aggregate_pixels([np.zeros((2, 3), dtype=np.uint8)])

    @pytest.mark.parametrize(
        "pixels",
        [
            np.array([[300, 0, 0, 255]]),
            np.array([[0, -1, 0, 255]]),
            [(0, 0, 256, 255)],
            [(0, 0, 0, -5)],
        ],
    )
    def test_channel_out_of_range(self, pixels: PixelsLike) -> None:
        """Raise a ValueError rather than wrap channels that do not fit in 8 bits."""
        with pytest.raises(ValueError):
            _ = aggregate_pixels([pixels])

    def test_wide_integer_array(self) -> None:
        """Accept in-range channels from a non-uint8 array."""
        pixels = np.array([[255, 0, 7, 255], [255, 0, 7, 128]], dtype=np.int32)
        sample_set = aggregate_pixels([pixels])
        assert sample_set.samples == (ColorSample(Color(255, 0, 7), 2),)

    def test_colors_as_pixels(self) -> None:
        """A sequence of Colors is a pixel stream, alpha included."""
        colors = [Color(1, 2, 3, 10), Color(1, 2, 3), Color(4, 5, 6)]
        sample_set = aggregate_pixels([colors], alpha_threshold=100)
        assert sample_set.samples == (
            ColorSample(Color(1, 2, 3), 1),
            ColorSample(Color(4, 5, 6), 1),
        )
        assert sample_set.filtered_count == 1

    @pytest.mark.parametrize("_", range(20))
    def test_mass_conservation(self, _: int) -> None:
        """Sample counts plus filtered pixels equal pixels scanned."""
        pixels = _random_pixels(random.randint(0, 200))
        threshold = random.randint(0, 255)
        sample_set = aggregate_pixels([pixels], threshold)
        assert sample_set.scanned_count == len(pixels)
        assert sample_set.population + sample_set.filtered_count == len(pixels)

    @pytest.mark.parametrize("_", range(20))
    def test_order_independent(self, _: int) -> None:
        """Shuffling pixels does not change the sample set."""
        pixels = _random_pixels(100)
        shuffled = random.sample(pixels, len(pixels))
        assert aggregate_pixels([pixels], 50) == aggregate_pixels([shuffled], 50)

    def test_sorted_samples(self) -> None:
        """Samples are sorted by rgb value."""
        pixels = _random_pixels(200)
        colors = [s.color for s in aggregate_pixels([pixels]).samples]
        assert colors == sorted(colors)


class TestValidateAlphaThreshold:
    @pytest.mark.parametrize("threshold", [-1, 256, 1.5, "10", True])
    def test_invalid(self, threshold: object) -> None:
        """Raise an InvalidAlphaThresholdError outside integers in [0, 255]."""
        with pytest.raises(InvalidAlphaThresholdError):
            _ = validate_alpha_threshold(threshold)

    def test_is_value_error(self) -> None:
        """Callers can catch a plain ValueError."""
        with pytest.raises(ValueError):
            _ = aggregate_pixels([], alpha_threshold=300)

    def test_numpy_integer(self) -> None:
        """Accept numpy integers and return a Python int."""
        result = validate_alpha_threshold(np.uint8(7))
        assert result == 7
        assert type(result) is int


class TestMergeSampleSets:
    def test_same_as_aggregating_at_once(self) -> None:
        """Merging per-stream sample sets equals aggregating all streams at once."""
        streams = [_random_pixels(50) for _ in range(3)]
        merged = merge_sample_sets(*(aggregate_pixels([x], 128) for x in streams))
        assert merged == aggregate_pixels(streams, 128)

    def test_merge_nothing(self) -> None:
        """Merging no sample sets returns an empty sample set."""
        assert merge_sample_sets() == SampleSet()


class TestColorSample:
    def test_positive_count(self) -> None:
        """Raise a ValueError for a sample with no pixels."""
        with pytest.raises(ValueError):
            _ = ColorSample(Color(0, 0, 0), 0)

    def test_samples_to_arrays(self) -> None:
        """Split samples into colors and counts."""
        samples = [ColorSample(Color(1, 2, 3), 4), ColorSample(Color(5, 6, 7), 8)]
        colors, counts = samples_to_arrays(samples)
        assert colors.tolist() == [[1, 2, 3], [5, 6, 7]]
        assert counts.tolist() == [4, 8]

    def test_empty_samples_to_arrays(self) -> None:
        """Empty samples give a (0, 3) color array."""
        colors, counts = samples_to_arrays([])
        assert colors.shape == (0, 3)
        assert counts.shape == (0,)
