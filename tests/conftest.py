"""See full diffs in pytest. Write small test images.

:author: Shay Hill
:created: 2026-10-18
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import numpy as np
import pytest
from PIL import Image

_WriteImage = Callable[[str, tuple[int, int, int, int], int], Path]


def pytest_assertrepr_compare(
    config: Any, op: str, left: str, right: str
) -> list[str] | None:
    """See full error diffs"""
    del config
    if op in ("==", "!="):
        return [f"{left} {op} {right}"]
    return None


@pytest.fixture
def write_solid_image(tmp_path: Path) -> _WriteImage:
    """Return a function that writes a square png of one rgba color."""

    def write(name: str, rgba: tuple[int, int, int, int], size: int = 4) -> Path:
        path = tmp_path / name
        pixels = np.full((size, size, 4), rgba, dtype=np.uint8)
        Image.fromarray(pixels).save(path)
        return path

    return write


@pytest.fixture
def three_color_image(tmp_path: Path) -> Path:
    """A png with three distinct opaque colors in unequal amounts."""
    pixels = np.zeros((3, 4, 4), dtype=np.uint8)
    pixels[...] = (10, 20, 30, 255)
    pixels[1, :] = (200, 100, 50, 255)
    pixels[2, :2] = (0, 255, 128, 255)
    path = tmp_path / "three_colors.png"
    Image.fromarray(pixels).save(path)
    return path
