"""Line up palette colors by hue, then saturation, then value.

The sort is stable. Colors with identical hsv values keep their input order, so
sorting an already sorted palette changes nothing.

:author: Shay Hill
:created: 2026-10-18
"""

from collections.abc import Iterable

from basic_colormath import rgb_to_hsv

from palette_quantizer.colors import Color


def get_hsv(color: Color) -> tuple[float, float, float]:
    """Get the hue [0, 360), saturation [0, 100], and value [0, 100] of a color."""
    hue, saturation, value = rgb_to_hsv(color.rgb)
    return (float(hue), float(saturation), float(value))


def sort_by_hsv(colors: Iterable[Color]) -> list[Color]:
    """Sort colors by hue, then saturation, then value, each ascending.

    :param colors: palette colors in any order
    :return: a new list of the same colors
    """
    return sorted(colors, key=get_hsv)
