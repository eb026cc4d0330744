"""Hough transform of a binary bitmap into a (distance × angle) vote accumulator.

Purpose-built for the axis-pair structure measure: 1-degree angle buckets,
distances truncated toward zero and only the non-negative half-plane kept.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache

import numpy as np
from numpy.typing import NDArray

DEFAULT_ANGLE_BUCKETS = 360

# Lit cells processed per bincount call. Bounds the (cells × angles) distance
# buffer to ~4096 × 360 int64 values.
_CHUNK_CELLS = 4096


@dataclass(frozen=True)
class HoughResult:
    """Accumulator plus the number of votes that landed inside it."""

    accumulator: NDArray[np.int64]
    total_votes: int

    @property
    def median(self) -> float:
        """Mean vote per accumulator cell, the threshold used for block aggregation."""
        cells = self.accumulator.size
        if cells == 0:
            return 0.0
        return self.total_votes / cells


def max_distance(width: int, height: int) -> int:
    """Number of distance bins: ceil of the bitmap diagonal."""
    return int(math.ceil(math.sqrt(width**2 + height**2)))


@lru_cache(maxsize=8)
def _trig_tables(angle_buckets: int) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """cos/sin of every integer degree in [0, angle_buckets)."""
    theta = np.deg2rad(np.arange(angle_buckets, dtype=np.float64))
    cos_t = np.cos(theta)
    sin_t = np.sin(theta)
    cos_t.flags.writeable = False
    sin_t.flags.writeable = False
    return cos_t, sin_t


def hough_transform(
    bitmap: NDArray[np.integer],
    angle_buckets: int = DEFAULT_ANGLE_BUCKETS,
) -> HoughResult:
    """Vote every lit cell into the (distance, angle) accumulator.

    For a lit cell (x, y) and angle a, d = trunc(x·cos a + y·sin a). Votes with
    0 <= d < max_distance are counted; everything else is dropped.

    Args:
        bitmap: 2-D array, non-zero = lit. First index is x.
        angle_buckets: Number of 1-degree angle columns.

    Returns:
        HoughResult with a (max_distance × angle_buckets) int64 accumulator.
    """
    rows, cols = bitmap.shape
    n_dist = max_distance(rows, cols)
    cos_t, sin_t = _trig_tables(angle_buckets)

    votes = np.zeros(n_dist * angle_buckets, dtype=np.int64)
    xs, ys = np.nonzero(bitmap)
    angle_idx = np.arange(angle_buckets, dtype=np.int64)

    for start in range(0, len(xs), _CHUNK_CELLS):
        x = xs[start:start + _CHUNK_CELLS].astype(np.float64)
        y = ys[start:start + _CHUNK_CELLS].astype(np.float64)

        dist = np.trunc(x[:, None] * cos_t[None, :] + y[:, None] * sin_t[None, :]).astype(np.int64)
        valid = (dist >= 0) & (dist < n_dist)

        flat = dist * angle_buckets + angle_idx[None, :]
        votes += np.bincount(flat[valid], minlength=votes.size)

    accumulator = votes.reshape(n_dist, angle_buckets)
    return HoughResult(accumulator=accumulator, total_votes=int(votes.sum()))


def peak(result: HoughResult) -> tuple[int, int]:
    """(distance, angle) bin holding the most votes. First in row-major order on ties."""
    d, ang = np.unravel_index(int(np.argmax(result.accumulator)), result.accumulator.shape)
    return int(d), int(ang)
