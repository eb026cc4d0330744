"""S3.01: Axis Moves.

Translate the final order into positional moves for the host axis system:
for k = 0..D-1, move the axis currently showing order[k] into slot k.
"""

from __future__ import annotations

from hsm_order.engine.context import AxisMove, ArrangementContext
from hsm_order.engine.registry import Layer, stage
from hsm_order.errors import InvalidInputError


def apply_move(layout: list[int], move: AxisMove) -> None:
    """Move one axis in place. ``layout[slot]`` is the dimension shown in that slot."""
    layout.insert(move.target, layout.pop(move.source))


def apply_moves(layout: list[int], moves: list[AxisMove]) -> list[int]:
    """Replay ``moves`` on a copy of ``layout``."""
    result = list(layout)
    for move in moves:
        apply_move(result, move)
    return result


def plan_axis_moves(order: list[int], layout: list[int] | None = None) -> list[AxisMove]:
    """Moves that turn ``layout`` (identity if None) into ``order``."""
    current = list(range(len(order))) if layout is None else list(layout)
    if sorted(current) != sorted(order):
        raise InvalidInputError("Axis layout and order must contain the same dimensions")

    moves: list[AxisMove] = []
    for target, dimension in enumerate(order):
        move = AxisMove(dimension=dimension, source=current.index(dimension), target=target)
        apply_move(current, move)
        moves.append(move)
    return moves


@stage(
    id="S3.01",
    layer=Layer.PLACEMENT,
    dependencies=["S2.01"],
    description="Plan axis moves that apply the order to the display",
)
def axis_moves(ctx: ArrangementContext) -> None:
    ctx.moves = plan_axis_moves(ctx.order, ctx.current_layout)
