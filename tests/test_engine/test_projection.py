"""Tests for render-space projections."""

import numpy as np

from hsm_order.engine.projection import identity_projection, minmax_projection, project_points


def test_minmax_projection_spans_extent():
    points = np.array([[0.0, 10.0], [5.0, 30.0], [10.0, 20.0]])
    coords = project_points(points, minmax_projection(points), 2)

    assert coords[:, 0].tolist() == [0.0, 50.0, 100.0]
    assert coords[:, 1].tolist() == [0.0, 100.0, 50.0]


def test_minmax_projection_constant_dimension():
    points = np.array([[1.0, 7.0], [3.0, 7.0]])
    coords = project_points(points, minmax_projection(points, extent=10.0), 2)

    assert coords[:, 0].tolist() == [0.0, 10.0]
    assert coords[:, 1].tolist() == [0.0, 0.0]


def test_identity_projection():
    points = np.array([[1.5, 2.5], [3.0, 4.0]])
    coords = project_points(points, identity_projection, 2)
    assert np.array_equal(coords, points)


def test_project_points_empty():
    coords = project_points(np.empty((0, 3)), identity_projection, 3)
    assert coords.shape == (0, 3)


def test_project_points_custom_callable():
    points = np.array([[1.0, 2.0]])
    coords = project_points(points, lambda p: p * 10.0, 2)
    assert coords.tolist() == [[10.0, 20.0]]
