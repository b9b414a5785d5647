"""Quantize color samples with an rgb octree.

Each level of the octree consumes the next most-significant bit of red, green, and
blue. Those three bits select one of eight children, so the tree is eight levels
deep and every distinct 24-bit color comes to rest in its own leaf.

If there are more leaves than palette colors, the tree is reduced from the bottom
up. Reducing an octant replaces all of its (leaf) children with the octant itself,
now a leaf holding their combined sums and counts. The deepest level is reduced
first, and within a level, octants with the smallest population are reduced first,
so the least-used regions of color space are the first to lose detail.

Reducing an octant with n children removes n - 1 leaves at once, so the tree can
skip past palette_size. The palette this module returns may have fewer than
palette_size colors, even when there are more distinct colors than that. That is
accepted. Nothing re-splits leaves to make up the difference.

Octants live in a flat list and refer to their children by index.

:author: Shay Hill
:created: 2026-10-18
"""

from __future__ import annotations

import dataclasses
import heapq
import logging
from collections.abc import Iterator, Sequence

from palette_quantizer.colors import Color
from palette_quantizer.constants import OCTREE_DEPTH
from palette_quantizer.samples import ColorSample

# index of the root octant in Octree.octants
_ROOT = 0


def get_child_index(color: Color, level: int) -> int:
    """Select one of 8 children from one bit of each channel.

    :param color: color being inserted
    :param level: level of the parent octant [0, 7]. Level 0 reads the most
        significant bit of each channel.
    :return: child index [0, 7] with red as the high bit and blue as the low bit
    """
    shift = OCTREE_DEPTH - 1 - level
    red = (color.red >> shift) & 1
    green = (color.green >> shift) & 1
    blue = (color.blue >> shift) & 1
    return red << 2 | green << 1 | blue


@dataclasses.dataclass
class Octant:
    """One node in an rgb octree.

    :param level: depth in the tree. The root is level 0. Leaves created by
        inserting colors are level 8.
    :param code: the child indices on the path from the root, packed three bits per
        level. Unique within a level.
    """

    level: int
    code: int
    children: list[int | None] = dataclasses.field(
        default_factory=lambda: [None] * 8
    )
    is_leaf: bool = False
    red_sum: int = 0
    green_sum: int = 0
    blue_sum: int = 0
    count: int = 0

    @property
    def child_handles(self) -> list[int]:
        """Indices of existing children in child-index order."""
        return [x for x in self.children if x is not None]

    def add_sample(self, sample: ColorSample) -> None:
        """Add a sample's pixels to this (leaf) octant."""
        self.red_sum += sample.color.red * sample.count
        self.green_sum += sample.color.green * sample.count
        self.blue_sum += sample.color.blue * sample.count
        self.count += sample.count

    def get_average(self) -> Color:
        """Get the average color of all pixels in this octant."""
        return Color.from_weighted_sum(
            self.red_sum, self.green_sum, self.blue_sum, self.count
        )


class Octree:
    """An rgb octree over a set of color samples."""

    def __init__(self, samples: Sequence[ColorSample] = ()) -> None:
        """Create an octree and insert samples.

        :param samples: distinct color samples
        """
        self.octants = [Octant(level=0, code=0)]
        # handles of octants created as branches, by level
        self._branches: list[list[int]] = [[] for _ in range(OCTREE_DEPTH)]
        self._branches[0].append(_ROOT)
        self.leaf_count = 0
        for sample in samples:
            self.add_sample(sample)

    def _new_octant(self, parent: Octant, child_index: int) -> int:
        """Create a child octant and return its handle."""
        handle = len(self.octants)
        level = parent.level + 1
        octant = Octant(level=level, code=parent.code << 3 | child_index)
        self.octants.append(octant)
        parent.children[child_index] = handle
        if level == OCTREE_DEPTH:
            octant.is_leaf = True
            self.leaf_count += 1
        else:
            self._branches[level].append(handle)
        return handle

    def add_sample(self, sample: ColorSample) -> None:
        """Insert a sample, creating octants along its path as needed.

        :param sample: a color sample. Must not have been inserted already if the
            tree has been reduced.
        """
        octant = self.octants[_ROOT]
        for level in range(OCTREE_DEPTH):
            child_index = get_child_index(sample.color, level)
            handle = octant.children[child_index]
            if handle is None:
                handle = self._new_octant(octant, child_index)
            octant = self.octants[handle]
        octant.add_sample(sample)

    def _reduce_octant(self, handle: int) -> None:
        """Merge the (leaf) children of an octant into the octant."""
        octant = self.octants[handle]
        children = [self.octants[x] for x in octant.child_handles]
        for child in children:
            octant.red_sum += child.red_sum
            octant.green_sum += child.green_sum
            octant.blue_sum += child.blue_sum
            octant.count += child.count
        octant.children = [None] * 8
        octant.is_leaf = True
        self.leaf_count -= len(children) - 1

    def _get_children_population(self, handle: int) -> int:
        """Count the pixels in an octant's children."""
        return sum(self.octants[x].count for x in self.octants[handle].child_handles)

    def reduce(self, palette_size: int) -> None:
        """Reduce octants until there are no more than palette_size leaves.

        :param palette_size: maximum number of leaves
        :effect: merges octants. Leaves removed by merging are left in
            self.octants, but are no longer reachable from the root.

        Every branch below the current level has been reduced before a level is
        started, so every branch on that level has only leaf children.
        """
        for level in reversed(range(OCTREE_DEPTH)):
            if self.leaf_count <= palette_size:
                return
            reducible = [
                (self._get_children_population(x), self.octants[x].code, x)
                for x in self._branches[level]
            ]
            heapq.heapify(reducible)
            while reducible and self.leaf_count > palette_size:
                _, _, handle = heapq.heappop(reducible)
                self._reduce_octant(handle)

    def iter_leaves(self) -> Iterator[Octant]:
        """Yield reachable leaves depth first in child-index order."""
        stack = [_ROOT]
        while stack:
            octant = self.octants[stack.pop()]
            if octant.is_leaf:
                yield octant
            else:
                stack.extend(reversed(octant.child_handles))

    def get_palette(self) -> list[Color]:
        """Get the average color of each leaf."""
        return [leaf.get_average() for leaf in self.iter_leaves()]


def octree(samples: Sequence[ColorSample], palette_size: int) -> list[Color]:
    """Quantize samples into a palette with an octree.

    :param samples: distinct color samples
    :param palette_size: maximum number of palette colors. Must be positive.
    :return: no more than palette_size colors, possibly fewer
    """
    tree = Octree(samples)
    tree.reduce(palette_size)
    palette = tree.get_palette()
    if len(palette) < min(palette_size, len(samples)):
        logging.info(
            f"octree reduction overshot: {len(palette)} of {palette_size} colors"
        )
    else:
        logging.info(f"octree found {len(palette)} of {palette_size} colors")
    return palette
