"""ArrangementContext: the single mutable state object flowing through all stages.

Inputs (source, selector, projection, config) are set by the caller.
Stage results → point_ids, render_coords, similarity_matrix, order, moves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from hsm_order.engine.config import ArrangementConfig
from hsm_order.engine.projection import Projection, identity_projection
from hsm_order.engine.selection import DataSource, PointSetSelector, SampleSelector


@dataclass(frozen=True)
class AxisMove:
    """Move the axis showing ``dimension`` from slot ``source`` to slot ``target``."""

    dimension: int
    source: int
    target: int


@dataclass(frozen=True)
class PairScore:
    """Structure score of one dimension pair."""

    big_cells: int
    score: float


@dataclass
class ArrangementContext:
    """Shared state flowing through the entire arrangement pipeline."""

    # Data and which subset of it to use
    source: DataSource
    selector: PointSetSelector = field(default_factory=SampleSelector)
    # Number of dimensions to arrange (must match the source width)
    dimensionality: int = 0
    # Raw point → render-space coordinates
    projection: Projection = identity_projection
    config: ArrangementConfig = field(default_factory=ArrangementConfig)
    # Physical axis layout before arranging: layout[slot] = dimension (None = identity)
    current_layout: list[int] | None = None

    # --- Layer 0: resolved point set ---
    point_ids: NDArray[np.int64] | None = None
    # N×D projected coordinates of the resolved points
    render_coords: NDArray[np.float64] | None = None

    # --- Layer 1: pair scores ---
    similarity_matrix: NDArray[np.float64] | None = None
    pair_scores: dict[tuple[int, int], PairScore] = field(default_factory=dict)

    # --- Layer 2/3: ordering ---
    order: list[int] = field(default_factory=list)
    moves: list[AxisMove] = field(default_factory=list)

    # --- Pipeline metadata ---
    completed_stages: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)
    # Sub-progress hook installed by Pipeline.run_streaming: fn(completed_pairs, total_pairs)
    progress_callback: Callable[[int, int], None] | None = None

    def __post_init__(self) -> None:
        if not self.dimensionality:
            self.dimensionality = self.source.dimensionality

    @property
    def num_points(self) -> int:
        return 0 if self.point_ids is None else int(len(self.point_ids))

    @property
    def num_pairs(self) -> int:
        d = self.dimensionality
        return d * (d - 1) // 2
