"""An immutable 8-bit-per-channel color.

Colors compare and sort by their channel tuple (red, green, blue, alpha). Sorting
by appearance is a separate concern. See sort_colors.

:author: Shay Hill
:created: 2026-10-18
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator

from palette_quantizer.constants import CHANNEL_MAX


def _divide_and_round(numerator: int, denominator: int) -> int:
    """Divide two non-negative integers and round half up.

    Integer arithmetic, so there is no float error and no banker's rounding.
    """
    return (2 * numerator + denominator) // (2 * denominator)


@dataclasses.dataclass(frozen=True, order=True)
class Color:
    """A color with 8-bit red, green, blue, and alpha channels.

    :param red: red channel [0, 255]
    :param green: green channel [0, 255]
    :param blue: blue channel [0, 255]
    :param alpha: alpha channel [0, 255]. Defaults to opaque.
    """

    red: int
    green: int
    blue: int
    alpha: int = CHANNEL_MAX

    def __post_init__(self) -> None:
        """Reject channel values that will not fit in 8 bits."""
        for name, value in zip(("red", "green", "blue", "alpha"), self.rgba):
            if not 0 <= value <= CHANNEL_MAX:
                msg = f"{name} channel must be in [0, {CHANNEL_MAX}], got {value}"
                raise ValueError(msg)

    @classmethod
    def from_weighted_sum(
        cls, red_sum: int, green_sum: int, blue_sum: int, count: int
    ) -> Color:
        """Create an opaque color from channel sums over count pixels.

        :param red_sum: sum of the red channel over all pixels
        :param green_sum: sum of the green channel over all pixels
        :param blue_sum: sum of the blue channel over all pixels
        :param count: number of pixels summed. Must be positive.
        :return: the average color, each channel rounded to the nearest integer
        """
        if count <= 0:
            msg = f"cannot average over {count} pixels"
            raise ValueError(msg)
        return cls(
            _divide_and_round(red_sum, count),
            _divide_and_round(green_sum, count),
            _divide_and_round(blue_sum, count),
        )

    @property
    def rgb(self) -> tuple[int, int, int]:
        """Red, green, and blue channels."""
        return (self.red, self.green, self.blue)

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        """Red, green, blue, and alpha channels."""
        return (self.red, self.green, self.blue, self.alpha)

    def without_alpha(self) -> Color:
        """Return an opaque copy of this color."""
        return Color(self.red, self.green, self.blue)

    def __iter__(self) -> Iterator[int]:
        """Iterate over all four channels so Color(*color) == color.

        Use the rgb property to unpack red, green, and blue alone.
        """
        return iter(self.rgba)
