"""Constants for the project.

:author: Shay Hill
:created: 2026-10-18
"""

# every channel is an 8-bit integer
CHANNEL_MAX = 255

# red, green, blue, alpha
RGBA_CHANNELS = 4

# One octree level consumes one bit from each channel, so an 8-bit-per-channel
# color comes to rest in a leaf at this depth.
OCTREE_DEPTH = 8
