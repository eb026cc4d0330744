"""S1.01: Similarity Matrix. ★★★ CRITICAL

Hough Space Measure for every unordered dimension pair:
rasterize the pair's segments → Hough transform → 50×50 block threshold →
score = 1 - bigCells / 2500. The matrix is symmetric with a zero diagonal.
"""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from hsm_order.engine.config import ArrangementConfig
from hsm_order.engine.context import ArrangementContext, PairScore
from hsm_order.engine.registry import Layer, stage
from hsm_order.utils.cells import aggregate_cells, count_big_cells
from hsm_order.utils.hough import hough_transform, peak
from hsm_order.utils.rasterizer import lit_fraction, rasterize_pair

logger = logging.getLogger(__name__)


def score_pair(
    values_i: NDArray[np.float64],
    values_j: NDArray[np.float64],
    config: ArrangementConfig | None = None,
) -> PairScore:
    """Structure score of one dimension pair from the render-space values of its points."""
    cfg = config or ArrangementConfig()

    bitmap = rasterize_pair(values_i, values_j, cfg.bitmap_size, cfg.magnification)
    hough = hough_transform(bitmap, cfg.angle_buckets)
    grid = aggregate_cells(hough.accumulator, cfg.threshold_mode, hough.median, cfg.grid_cells)
    big_cells = count_big_cells(grid)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "    lit=%.3f votes=%d peak=%s big_cells=%d",
            lit_fraction(bitmap),
            hough.total_votes,
            peak(hough),
            big_cells,
        )

    return PairScore(big_cells=big_cells, score=1.0 - big_cells / cfg.grid_area)


def build_similarity_matrix(
    render_coords: NDArray[np.float64],
    config: ArrangementConfig | None = None,
    progress: Callable[[int, int], None] | None = None,
) -> tuple[NDArray[np.float64], dict[tuple[int, int], PairScore]]:
    """Score every pair i < j of the columns of ``render_coords`` (N×D).

    Args:
        render_coords: Projected coordinates of the resolved point set.
        config: Raster / Hough / grid parameters.
        progress: Called with (completed_pairs, total_pairs) after each pair.

    Returns:
        (D×D symmetric matrix, {(i, j): PairScore} for i < j)
    """
    cfg = config or ArrangementConfig()
    coords = np.atleast_2d(np.asarray(render_coords, dtype=np.float64))
    dim = coords.shape[1]

    matrix = np.zeros((dim, dim), dtype=np.float64)
    scores: dict[tuple[int, int], PairScore] = {}

    total = dim * (dim - 1) // 2
    done = 0

    for i in range(dim - 1):
        for j in range(i + 1, dim):
            pair = score_pair(coords[:, i], coords[:, j], cfg)
            matrix[i, j] = pair.score
            matrix[j, i] = pair.score
            scores[(i, j)] = pair

            done += 1
            logger.debug("HSM progress %d/%d (%d, %d) = %.4f", done, total, i, j, pair.score)
            if progress:
                progress(done, total)

    logger.debug("HSM similarity matrix:\n%s", np.array2string(matrix, precision=4))
    return matrix, scores


@stage(
    id="S1.01",
    layer=Layer.SCORING,
    dependencies=["S0.01"],
    description="Score every dimension pair with the Hough space measure",
)
def similarity_matrix(ctx: ArrangementContext) -> None:
    matrix, scores = build_similarity_matrix(
        ctx.render_coords, ctx.config, ctx.progress_callback
    )
    ctx.similarity_matrix = matrix
    ctx.pair_scores = scores
