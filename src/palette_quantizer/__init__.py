"""Import functions into the package namespace.

:author: Shay Hill
:created: 2026-10-18
"""

from palette_quantizer.colors import Color
from palette_quantizer.image_arrays import extract_image_palette, get_image_pixels
from palette_quantizer.median_cut import median_cut
from palette_quantizer.octree import octree
from palette_quantizer.quantization import (
    InvalidPaletteSizeError,
    Method,
    Palette,
    extract_palette,
    quantize,
)
from palette_quantizer.samples import (
    ColorSample,
    InvalidAlphaThresholdError,
    SampleSet,
    aggregate_pixels,
    merge_sample_sets,
)
from palette_quantizer.sort_colors import sort_by_hsv

__all__ = [
    "Color",
    "ColorSample",
    "InvalidAlphaThresholdError",
    "InvalidPaletteSizeError",
    "Method",
    "Palette",
    "SampleSet",
    "aggregate_pixels",
    "extract_image_palette",
    "extract_palette",
    "get_image_pixels",
    "median_cut",
    "merge_sample_sets",
    "octree",
    "quantize",
    "sort_by_hsv",
]
