"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from hsm_order.engine.config import ArrangementConfig
from hsm_order.engine.selection import DataSource

# Small raster for fast pipeline tests: render space [0, 100] → 100×100 bitmap.
SMALL_CONFIG = ArrangementConfig(bitmap_size=100, magnification=1.0, grid_cells=20)


def make_structured_points(n: int = 300, seed: int = 7) -> np.ndarray:
    """4 render-space dims: 0 and 1 identical in a narrow band, 2 and 3 uniform noise."""
    rng = np.random.default_rng(seed)
    base = rng.uniform(49.0, 51.0, n)
    noise = rng.uniform(0.0, 100.0, (n, 2))
    return np.column_stack([base, base, noise])


def make_random_points(n: int = 40, dims: int = 4, seed: int = 3) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.uniform(0.0, 100.0, (n, dims))


@pytest.fixture
def structured_points() -> np.ndarray:
    return make_structured_points()


@pytest.fixture
def random_source() -> DataSource:
    points = make_random_points()
    n = len(points)
    return DataSource(
        points=points,
        clusters=[list(range(0, n // 2)), list(range(n // 2, n))],
        sample=list(range(0, n, 2)),
        selection=[1, 5, 9, 13],
    )


@pytest.fixture
def small_config() -> ArrangementConfig:
    return ArrangementConfig(
        bitmap_size=SMALL_CONFIG.bitmap_size,
        magnification=SMALL_CONFIG.magnification,
        grid_cells=SMALL_CONFIG.grid_cells,
    )
