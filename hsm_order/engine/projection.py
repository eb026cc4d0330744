"""Projection of raw data points into parallel-coordinate render space."""

from __future__ import annotations

from typing import Callable

import numpy as np
from numpy.typing import NDArray

# Render-space height of an axis. 100 × magnification 5 = 500-cell bitmap.
DEFAULT_EXTENT = 100.0

Projection = Callable[[NDArray[np.float64]], NDArray[np.float64]]


def minmax_projection(points: NDArray[np.float64], extent: float = DEFAULT_EXTENT) -> Projection:
    """Linear per-dimension projection onto [0, extent] fitted to ``points``.

    Constant dimensions project to 0.
    """
    pts = np.atleast_2d(np.asarray(points, dtype=np.float64))
    lo = pts.min(axis=0)
    span = pts.max(axis=0) - lo
    scale = np.divide(extent, span, out=np.zeros_like(span), where=span > 0)

    def project(point: NDArray[np.float64]) -> NDArray[np.float64]:
        return (np.asarray(point, dtype=np.float64) - lo) * scale

    return project


def identity_projection(point: NDArray[np.float64]) -> NDArray[np.float64]:
    """Raw coordinates are already in render space."""
    return np.asarray(point, dtype=np.float64)


def project_points(
    points: NDArray[np.float64],
    projection: Projection,
    dimensionality: int,
) -> NDArray[np.float64]:
    """Apply ``projection`` to every point; returns an N×D render-space array."""
    if len(points) == 0:
        return np.empty((0, dimensionality))
    coords = np.array([projection(p) for p in points], dtype=np.float64)
    return coords.reshape(len(points), -1)
