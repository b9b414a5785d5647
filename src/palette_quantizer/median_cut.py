"""Quantize color samples by recursively splitting boxes at the weighted median.

1. Put every sample into one box.
2. Take the box with the greatest population (sum of sample counts). Break ties
   with the widest channel range, then with the order in which boxes were created.
3. Sort that box's samples along its widest channel and split it where the
   cumulative count reaches half the population. Both halves go back into the
   worklist.
4. A box with only one distinct color cannot be split, so it is set aside as final.
5. Stop when there are palette_size boxes or nothing left to split. Each box
   becomes one palette color: the count-weighted average of its samples.

Because only single-color boxes are ever left unsplit, median cut always returns
min(palette_size, number of distinct colors) colors.

:author: Shay Hill
:created: 2026-10-18
"""

from __future__ import annotations

import dataclasses
import functools as ft
import heapq
import itertools as it
import logging
from collections.abc import Sequence
from typing import Annotated, TypeAlias

import numpy as np
from numpy import typing as npt

from palette_quantizer.colors import Color
from palette_quantizer.samples import ColorSample, samples_to_arrays

_Colors: TypeAlias = Annotated[npt.NDArray[np.int64], "(m,3)"]
_Counts: TypeAlias = Annotated[npt.NDArray[np.int64], "(m,)"]
_RGB: TypeAlias = Annotated[npt.NDArray[np.int64], "(3,)"]

# (-population, -widest range, creation index). heapq pops the smallest key.
_Priority: TypeAlias = tuple[int, int, int]


@dataclasses.dataclass(frozen=True, eq=False)
class ColorBox:
    """An axis-aligned region of rgb space holding some of the samples.

    :param colors: (m, 3) array of distinct rgb values
    :param counts: (m,) array of pixel counts, one per color
    """

    colors: _Colors
    counts: _Counts

    def __len__(self) -> int:
        """Return the number of distinct colors in the box."""
        return len(self.colors)

    @ft.cached_property
    def mins(self) -> _RGB:
        """Minimum value of each channel."""
        return np.min(self.colors, axis=0)

    @ft.cached_property
    def maxs(self) -> _RGB:
        """Maximum value of each channel."""
        return np.max(self.colors, axis=0)

    @ft.cached_property
    def population(self) -> int:
        """Count the pixels in the box."""
        return int(np.sum(self.counts))

    @property
    def widest_axis(self) -> int:
        """Return the channel index (0, 1, or 2) with the largest range.

        Where two channels have the same range, prefer red, then green.
        """
        return int(np.argmax(self.maxs - self.mins))

    @property
    def widest_range(self) -> int:
        """Return the range of the widest channel."""
        return int(np.max(self.maxs - self.mins))

    def _get_sort_order(self, axis: int) -> npt.NDArray[np.intp]:
        """Get indices that sort colors along an axis.

        :param axis: primary channel index
        :return: (m,) indices into self.colors

        The remaining channels break ties, so the order is total and does not
        depend on the order samples arrived in.
        """
        others = [x for x in range(3) if x != axis]
        keys = [self.colors[:, x] for x in reversed(others)]
        return np.lexsort((*keys, self.colors[:, axis]))

    def get_median_index(self, sorted_counts: _Counts) -> int:
        """Find the last index of the lower half of a split.

        :param sorted_counts: self.counts sorted along the split axis
        :return: the first index where the cumulative count reaches half the
            population, limited so the upper half is never empty.
        """
        cumulative = np.cumsum(sorted_counts)
        median = int(np.searchsorted(cumulative * 2, self.population, side="left"))
        return min(median, len(self) - 2)

    def split(self) -> tuple[ColorBox, ColorBox]:
        """Split the box at the weighted median of its widest channel.

        :return: two boxes. The first holds samples up to and including the median,
            the second holds the rest.
        :raise ValueError: if the box holds fewer than two colors
        """
        if len(self) < 2:
            msg = "Cannot split a box with fewer than two colors."
            raise ValueError(msg)
        order = self._get_sort_order(self.widest_axis)
        median = self.get_median_index(self.counts[order])
        below, above = order[: median + 1], order[median + 1 :]
        return (
            ColorBox(self.colors[below], self.counts[below]),
            ColorBox(self.colors[above], self.counts[above]),
        )

    def get_average(self) -> Color:
        """Get the count-weighted average color of the box."""
        red, green, blue = (int(x) for x in self.counts @ self.colors)
        return Color.from_weighted_sum(red, green, blue, self.population)


def _get_priority(box: ColorBox, index: int) -> _Priority:
    """Get a heap key that pops the most populous, then widest, then oldest box."""
    return (-box.population, -box.widest_range, index)


def cut_boxes(samples: Sequence[ColorSample], palette_size: int) -> list[ColorBox]:
    """Split samples into at most palette_size boxes.

    :param samples: distinct color samples
    :param palette_size: maximum number of boxes. Must be positive.
    :return: boxes in the order they were finalized. Single-color boxes are
        finalized when they are popped. When palette_size is reached, the boxes
        remaining in the worklist are finalized in priority order.
    """
    if not samples:
        return []
    box_index = it.count()
    worklist: list[tuple[_Priority, ColorBox]] = []

    def push(box: ColorBox) -> None:
        heapq.heappush(worklist, (_get_priority(box, next(box_index)), box))

    push(ColorBox(*samples_to_arrays(samples)))
    final: list[ColorBox] = []
    while worklist:
        if len(worklist) + len(final) >= palette_size:
            final.extend(heapq.heappop(worklist)[1] for _ in range(len(worklist)))
            break
        _, box = heapq.heappop(worklist)
        if len(box) < 2:
            final.append(box)
            continue
        for child in box.split():
            push(child)
    return final


def median_cut(samples: Sequence[ColorSample], palette_size: int) -> list[Color]:
    """Quantize samples into a palette with median cut.

    :param samples: distinct color samples
    :param palette_size: maximum number of palette colors. Must be positive.
    :return: min(palette_size, len(samples)) colors
    """
    palette = [box.get_average() for box in cut_boxes(samples, palette_size)]
    logging.info(f"median cut found {len(palette)} of {palette_size} colors")
    return palette
