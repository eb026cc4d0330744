"""S0.01: Point Set Resolution.

Resolve the selector (cluster / sample / selection) to point ids once per
request, then project every resolved point into render space.
"""

from __future__ import annotations

import logging

import numpy as np

from hsm_order.engine.context import ArrangementContext
from hsm_order.engine.projection import project_points
from hsm_order.engine.registry import Layer, stage
from hsm_order.engine.selection import resolve_point_set
from hsm_order.errors import InvalidInputError

logger = logging.getLogger(__name__)


@stage(
    id="S0.01",
    layer=Layer.SELECTION,
    description="Resolve the point set and project it into render space",
)
def point_set(ctx: ArrangementContext) -> None:
    ids = resolve_point_set(ctx.source, ctx.selector)
    coords = project_points(ctx.source.points[ids], ctx.projection, ctx.dimensionality)

    if coords.shape[1] != ctx.dimensionality:
        raise InvalidInputError(
            f"Projection returned {coords.shape[1]} coordinates, expected {ctx.dimensionality}"
        )
    if not np.isfinite(coords).all():
        bad = sorted({int(ids[r]) for r in np.argwhere(~np.isfinite(coords))[:, 0]})
        raise InvalidInputError(
            f"Non-finite render coordinates for points {bad[:10]}"
            + (" ..." if len(bad) > 10 else "")
        )

    ctx.point_ids = ids
    ctx.render_coords = coords
    logger.debug(
        "Resolved %s: %d points × %d dims", ctx.selector.describe(), len(ids), ctx.dimensionality
    )
