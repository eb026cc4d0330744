"""Tests for Layer 3: axis moves."""

import numpy as np
import pytest

from hsm_order.engine.context import ArrangementContext, AxisMove
from hsm_order.engine.layer3.s3_01_axis_moves import (
    apply_move,
    apply_moves,
    axis_moves,
    plan_axis_moves,
)
from hsm_order.engine.selection import DataSource
from hsm_order.errors import InvalidInputError


def test_apply_move():
    layout = [0, 1, 2, 3]
    apply_move(layout, AxisMove(dimension=3, source=3, target=0))
    assert layout == [3, 0, 1, 2]


def test_plan_from_identity():
    moves = plan_axis_moves([2, 0, 1])
    assert moves == [
        AxisMove(dimension=2, source=2, target=0),
        AxisMove(dimension=0, source=1, target=1),
        AxisMove(dimension=1, source=2, target=2),
    ]
    assert apply_moves([0, 1, 2], moves) == [2, 0, 1]


def test_plan_from_existing_layout():
    layout = [3, 1, 0, 2]
    order = [0, 1, 2, 3]
    moves = plan_axis_moves(order, layout)
    assert apply_moves(layout, moves) == order
    assert moves[0] == AxisMove(dimension=0, source=2, target=0)
    # Input layout untouched
    assert layout == [3, 1, 0, 2]


@pytest.mark.parametrize("seed", range(5))
def test_replay_reaches_order(seed):
    rng = np.random.default_rng(seed)
    order = rng.permutation(8).tolist()
    layout = rng.permutation(8).tolist()
    assert apply_moves(layout, plan_axis_moves(order, layout)) == order


def test_one_move_per_slot():
    assert len(plan_axis_moves([1, 0, 3, 2, 4])) == 5


def test_layout_mismatch():
    with pytest.raises(InvalidInputError):
        plan_axis_moves([0, 1, 2], [0, 1, 3])


def test_stage_uses_current_layout():
    ctx = ArrangementContext(source=DataSource(points=np.zeros((2, 3))), current_layout=[2, 1, 0])
    ctx.order = [1, 2, 0]
    axis_moves(ctx)
    assert apply_moves([2, 1, 0], ctx.moves) == [1, 2, 0]
