"""Rasterization of parallel-coordinate segments onto a fixed-size bitmap.

Each data point becomes one straight segment between the two axes of a
dimension pair: it starts at column 0 at the point's scaled value on the
left axis and ends at column ``size - 1`` at its scaled value on the right
axis. No engine imports.
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
from numpy.typing import NDArray

# Default raster: 500×500 cells, render space [0, 100] scaled ×5.
DEFAULT_BITMAP_SIZE = 500
DEFAULT_MAGNIFICATION = 5.0


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> Iterator[tuple[int, int]]:
    """Generate cell coordinates along a line using Bresenham's algorithm.

    Symmetric error term, so every octant is handled by the same loop and
    no cell is skipped for steep or negative slopes.

    Args:
        x0, y0: Start cell coordinates
        x1, y1: End cell coordinates

    Yields:
        (x, y) cell coordinates along the line, both endpoints included
    """
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    x, y = x0, y0

    while True:
        yield (x, y)

        if x == x1 and y == y1:
            break

        e2 = 2 * err

        if e2 > dy:
            err += dy
            x += sx

        if e2 < dx:
            err += dx
            y += sy


def clamp_cell(value: int, size: int) -> int:
    """Clamp a cell coordinate into [0, size - 1]. A value equal to size maps to size - 1."""
    return min(max(value, 0), size - 1)


def draw_line(bitmap: NDArray[np.uint8], x0: int, y0: int, x1: int, y1: int) -> None:
    """Mark every cell of the digital line (x0, y0)-(x1, y1) in place.

    Endpoints are clamped to the bitmap bounds first. Marking is idempotent.
    """
    rows, cols = bitmap.shape
    x0, x1 = clamp_cell(x0, rows), clamp_cell(x1, rows)
    y0, y1 = clamp_cell(y0, cols), clamp_cell(y1, cols)

    for x, y in bresenham_line(x0, y0, x1, y1):
        bitmap[x, y] = 1


def rasterize_pair(
    values_i: NDArray[np.float64],
    values_j: NDArray[np.float64],
    size: int = DEFAULT_BITMAP_SIZE,
    magnification: float = DEFAULT_MAGNIFICATION,
) -> NDArray[np.uint8]:
    """Rasterize the parallel-coordinate segments of one dimension pair.

    Args:
        values_i: Render-space values of every point on the left axis.
        values_j: Render-space values of the same points on the right axis.
        size: Bitmap edge length in cells.
        magnification: Scale from render space to bitmap cells.

    Returns:
        size×size bitmap where 1 = lit, 0 = empty.
    """
    bitmap = np.zeros((size, size), dtype=np.uint8)

    # int() truncates toward zero
    starts = [int(magnification * v) for v in np.asarray(values_i, dtype=np.float64)]
    ends = [int(magnification * v) for v in np.asarray(values_j, dtype=np.float64)]

    for y0, y1 in zip(starts, ends):
        draw_line(bitmap, 0, y0, size - 1, y1)

    return bitmap


def lit_fraction(bitmap: NDArray[np.uint8]) -> float:
    """Fraction of lit cells (0.0-1.0)."""
    return float(np.count_nonzero(bitmap)) / bitmap.size if bitmap.size else 0.0
