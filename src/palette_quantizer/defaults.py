"""Default values for palette extraction.

:author: Shay Hill
:created: 2026-10-18
"""

# Pixels with an alpha value below this threshold are ignored. The default, 0,
# admits every pixel, including fully transparent ones. Raise this to 255 to only
# sample fully opaque pixels.
ALPHA_THRESHOLD = 0


# Quantization method used when none is given. "median-cut" always produces
# min(palette_size, number of distinct colors) colors. "octree" is faster on images
# with many distinct colors, but may produce fewer colors than requested.
METHOD = "median-cut"
