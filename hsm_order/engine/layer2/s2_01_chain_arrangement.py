"""S2.01: Chain Arrangement.

Greedy double-ended nearest-neighbour chain over the similarity matrix:
seed with the strongest pair, then repeatedly attach the best unconsumed
match of whichever chain end has the stronger one. Ties extend the back.
"""

from __future__ import annotations

import logging
from collections import deque

import numpy as np
from numpy.typing import NDArray

from hsm_order.engine.context import ArrangementContext
from hsm_order.engine.registry import Layer, stage
from hsm_order.errors import InvalidInputError

logger = logging.getLogger(__name__)

# Below any |score|, so masked entries never win an argmax.
_MASKED = -1.0


def _seed_pair(magnitude: NDArray[np.float64]) -> tuple[int, int]:
    """Off-diagonal cell with the largest |score|, first in row-major order on ties."""
    work = magnitude.copy()
    np.fill_diagonal(work, _MASKED)
    a, b = np.unravel_index(int(np.argmax(work)), work.shape)
    return int(a), int(b)


def _best_match(
    magnitude: NDArray[np.float64],
    frontier: int,
    consumed: NDArray[np.bool_],
) -> tuple[int, float]:
    """Best unconsumed partner of ``frontier`` and its |score|. Lowest index on ties."""
    row = np.where(consumed, _MASKED, magnitude[frontier])
    candidate = int(np.argmax(row))
    return candidate, float(row[candidate])


def build_chain(matrix: NDArray[np.float64]) -> list[int]:
    """Linearize a D×D similarity matrix into an axis order.

    The matrix is read only; consumed dimensions are tracked separately.

    Returns:
        A permutation of range(D).
    """
    magnitude = np.abs(np.asarray(matrix, dtype=np.float64))
    if magnitude.ndim != 2 or magnitude.shape[0] != magnitude.shape[1]:
        raise InvalidInputError(f"Similarity matrix must be square, got shape {magnitude.shape}")

    dim = magnitude.shape[0]
    if dim < 2:
        raise InvalidInputError(f"Need at least 2 dimensions to arrange, got {dim}")

    a, b = _seed_pair(magnitude)
    chain: deque[int] = deque([a, b])
    consumed = np.zeros(dim, dtype=bool)
    consumed[[a, b]] = True
    front, back = a, b

    while len(chain) < dim:
        front_match, front_score = _best_match(magnitude, front, consumed)
        back_match, back_score = _best_match(magnitude, back, consumed)

        if front_score > back_score:
            chain.appendleft(front_match)
            consumed[front_match] = True
            front = front_match
        else:
            chain.append(back_match)
            consumed[back_match] = True
            back = back_match

    return list(chain)


@stage(
    id="S2.01",
    layer=Layer.ARRANGEMENT,
    dependencies=["S1.01"],
    description="Greedy chain ordering of dimensions by mutual similarity",
)
def chain_arrangement(ctx: ArrangementContext) -> None:
    ctx.order = build_chain(ctx.similarity_matrix)
    logger.debug("HSM order: %s", "  ".join(str(d) for d in ctx.order))
