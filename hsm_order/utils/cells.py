"""Block aggregation of a Hough accumulator into a coarse binary grid."""

from __future__ import annotations

import enum

import numpy as np
from numpy.typing import NDArray

from hsm_order.errors import InvalidInputError

DEFAULT_GRID_CELLS = 50


class ThresholdMode(enum.IntEnum):
    ANY = 1  # some source cell above the median
    ALL = 2  # every source cell above the median
    AVERAGE = 3  # block mean above the median

    @classmethod
    def parse(cls, value: int | str | ThresholdMode) -> ThresholdMode:
        """Accept 1/2/3, a member, or a member name ("average")."""
        if isinstance(value, str) and not value.strip().isdigit():
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise InvalidInputError(f"Unknown threshold mode: {value!r}") from None
        if isinstance(value, float) and not value.is_integer():
            raise InvalidInputError(f"Threshold mode must be an integer (got {value!r})")
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise InvalidInputError(
                f"Threshold mode must be one of 1, 2, 3 (got {value!r})"
            ) from None


def block_edges(length: int, cells: int = DEFAULT_GRID_CELLS) -> NDArray[np.int64]:
    """Boundaries of ``cells`` blocks over ``length`` source rows/columns.

    The step is fractional (length / cells) and each boundary is truncated, so
    the blocks tile the whole axis with sizes differing by at most one.
    """
    step = length / cells
    edges = np.array([int(k * step) for k in range(cells + 1)], dtype=np.int64)
    # cells * step can land just below length in floating point
    edges[-1] = length
    return edges


def _block_is_big(block: NDArray[np.integer], mode: ThresholdMode, median: float) -> bool:
    if block.size == 0:
        return False
    if mode is ThresholdMode.ANY:
        return bool((block > median).any())
    if mode is ThresholdMode.ALL:
        return bool((block > median).all())
    return float(block.mean()) > median


def aggregate_cells(
    accumulator: NDArray[np.integer],
    mode: ThresholdMode | int = ThresholdMode.AVERAGE,
    median: float = 0.0,
    cells: int = DEFAULT_GRID_CELLS,
) -> NDArray[np.uint8]:
    """Down-sample the accumulator into a cells×cells grid of 0/1 values.

    Args:
        accumulator: (distance × angle) vote counts.
        mode: Block rule, see ThresholdMode.
        median: Threshold, the mean vote of the whole accumulator.
        cells: Grid edge length.

    Returns:
        uint8 grid, 1 = block exceeds the threshold under ``mode``.
    """
    mode = ThresholdMode.parse(mode)
    grid = np.zeros((cells, cells), dtype=np.uint8)

    row_edges = block_edges(accumulator.shape[0], cells)
    col_edges = block_edges(accumulator.shape[1], cells)

    for i in range(cells):
        r0, r1 = row_edges[i], row_edges[i + 1]
        for j in range(cells):
            block = accumulator[r0:r1, col_edges[j]:col_edges[j + 1]]
            if _block_is_big(block, mode, median):
                grid[i, j] = 1

    return grid


def count_big_cells(grid: NDArray[np.uint8]) -> int:
    """Number of 1-cells in the coarse grid."""
    return int(np.count_nonzero(grid == 1))
