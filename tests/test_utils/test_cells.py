"""Tests for block aggregation and threshold modes."""

from __future__ import annotations

import numpy as np
import pytest

from hsm_order.errors import InvalidInputError
from hsm_order.utils.cells import (
    ThresholdMode,
    aggregate_cells,
    block_edges,
    count_big_cells,
)


def test_block_edges_default_accumulator():
    rows = block_edges(708, 50)
    cols = block_edges(360, 50)

    assert rows[0] == 0 and rows[-1] == 708
    assert cols[0] == 0 and cols[-1] == 360
    assert len(rows) == len(cols) == 51
    # Fractional step: block sizes differ by at most one
    assert set(np.diff(rows)) <= {14, 15}
    assert set(np.diff(cols)) <= {7, 8}


def test_block_edges_shorter_than_grid():
    edges = block_edges(10, 50)
    assert edges[0] == 0 and edges[-1] == 10
    assert (np.diff(edges) >= 0).all()
    # Most blocks are empty
    assert int((np.diff(edges) == 0).sum()) == 40


def _two_by_two_blocks() -> np.ndarray:
    # 100×100 with 50 cells → every block is 2×2
    return np.zeros((100, 100), dtype=np.int64)


def test_mode_any():
    acc = _two_by_two_blocks()
    acc[0, 0] = 10
    grid = aggregate_cells(acc, ThresholdMode.ANY, median=1.0)
    assert grid[0, 0] == 1
    assert count_big_cells(grid) == 1


def test_mode_all():
    acc = _two_by_two_blocks()
    acc[0:2, 0:2] = [[10, 10], [10, 0]]
    acc[2:4, 2:4] = 10
    grid = aggregate_cells(acc, ThresholdMode.ALL, median=1.0)
    assert grid[0, 0] == 0
    assert grid[1, 1] == 1
    assert count_big_cells(grid) == 1


def test_mode_average_is_strict():
    acc = _two_by_two_blocks()
    acc[0, 0] = 4  # block mean 1.0

    assert aggregate_cells(acc, ThresholdMode.AVERAGE, median=0.5)[0, 0] == 1
    assert aggregate_cells(acc, ThresholdMode.AVERAGE, median=1.0)[0, 0] == 0


def test_modes_ordered_by_strictness():
    rng = np.random.default_rng(5)
    acc = rng.integers(0, 20, (708, 360))
    median = float(acc.mean())

    big_any = count_big_cells(aggregate_cells(acc, ThresholdMode.ANY, median))
    big_avg = count_big_cells(aggregate_cells(acc, ThresholdMode.AVERAGE, median))
    big_all = count_big_cells(aggregate_cells(acc, ThresholdMode.ALL, median))

    assert big_all <= big_avg <= big_any <= 2500


def test_grid_is_binary_and_sized():
    rng = np.random.default_rng(2)
    acc = rng.integers(0, 5, (708, 360))
    grid = aggregate_cells(acc, ThresholdMode.AVERAGE, float(acc.mean()))
    assert grid.shape == (50, 50)
    assert set(np.unique(grid)) <= {0, 1}


@pytest.mark.parametrize("mode", list(ThresholdMode))
def test_empty_blocks_are_never_big(mode):
    acc = np.full((10, 10), 5, dtype=np.int64)
    grid = aggregate_cells(acc, mode, median=1.0)
    # Only the 10 × 10 non-empty blocks can be big
    assert count_big_cells(grid) == 100


def test_uniform_accumulator_has_no_big_cells():
    acc = np.full((708, 360), 3, dtype=np.int64)
    for mode in ThresholdMode:
        assert count_big_cells(aggregate_cells(acc, mode, median=3.0)) == 0


@pytest.mark.parametrize(
    "value,expected",
    [
        (1, ThresholdMode.ANY),
        (2, ThresholdMode.ALL),
        (3, ThresholdMode.AVERAGE),
        ("3", ThresholdMode.AVERAGE),
        (2.0, ThresholdMode.ALL),
        ("average", ThresholdMode.AVERAGE),
        ("ALL", ThresholdMode.ALL),
        (ThresholdMode.ANY, ThresholdMode.ANY),
    ],
)
def test_threshold_mode_parse(value, expected):
    assert ThresholdMode.parse(value) is expected


@pytest.mark.parametrize("value", [0, 4, -1, "median", None, 3.7, 1.5, float("nan")])
def test_threshold_mode_parse_rejects(value):
    with pytest.raises(InvalidInputError):
        ThresholdMode.parse(value)
