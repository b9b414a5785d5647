"""Render palettes as text.

:author: Shay Hill
:created: 2026-10-18
"""

from __future__ import annotations

from basic_colormath import rgb_to_hex

from palette_quantizer.colors import Color
from palette_quantizer.quantization import Palette

_RESET = "\x1b[0m"
_BOLD = "\x1b[1m"


def format_rgb(color: Color) -> str:
    """Format a color as three right-aligned decimal channels, e.g. '255   0  12'."""
    return f"{color.red:>3} {color.green:>3} {color.blue:>3}"


def format_hex(color: Color) -> str:
    """Format a color as an upper-case hex string, e.g. '#FF000C'."""
    return rgb_to_hex(color.rgb).upper()


def colorize(text: str, color: Color) -> str:
    """Wrap text in an ANSI 24-bit foreground color escape."""
    return f"\x1b[38;2;{color.red};{color.green};{color.blue}m{text}{_RESET}"


def format_color(
    color: Color, *, rgb: bool = False, hex_: bool = False, colored: bool = True
) -> str:
    """Format one palette color.

    :param color: color to format
    :param rgb: show decimal channels
    :param hex_: show a hex string
    :param colored: print the text in the color it describes
    :return: decimal channels, hex, or both separated by a space. Decimal channels
        are shown if requested or if hex is not.
    """
    parts: list[str] = []
    if rgb or not hex_:
        parts.append(format_rgb(color))
    if hex_:
        parts.append(format_hex(color))
    text = " ".join(parts)
    if colored:
        return colorize(text, color)
    return text


def format_palette(
    palette: Palette, *, rgb: bool = False, hex_: bool = False, colored: bool = True
) -> list[str]:
    """Format each palette color on its own line. See format_color."""
    return [
        format_color(x, rgb=rgb, hex_=hex_, colored=colored) for x in palette.colors
    ]


def format_summary(palette: Palette) -> str:
    """Describe requested and achieved sizes, e.g. '6 of 8 colors (octree)'."""
    return (
        f"{palette.achieved_size} of {palette.requested_size} colors "
        + f"({palette.method.value})"
    )


def format_image_header(number: int, path: str, *, colored: bool = True) -> str:
    """Name one image in per-image output, e.g. 'Image 2: logo.png'.

    :param number: position of the image in the command line, counting from 1
    :param path: path as given
    :param colored: show "Image <number>" in bold
    """
    label = f"Image {number}"
    if colored:
        label = f"{_BOLD}{label}{_RESET}"
    return f"{label}: {path}"
