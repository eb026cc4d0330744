"""Tests for the Hough accumulator."""

from __future__ import annotations

import numpy as np

from hsm_order.utils.hough import hough_transform, max_distance, peak


def test_max_distance_default_bitmap():
    assert max_distance(500, 500) == 708
    assert max_distance(3, 4) == 5


def test_accumulator_shape():
    result = hough_transform(np.zeros((500, 500), dtype=np.uint8))
    assert result.accumulator.shape == (708, 360)
    assert result.total_votes == 0
    assert result.median == 0.0


def test_horizontal_line_peaks_at_90_degrees():
    bitmap = np.zeros((500, 500), dtype=np.uint8)
    bitmap[:, 100] = 1

    result = hough_transform(bitmap)

    assert peak(result) == (100, 90)
    assert result.accumulator[100, 90] == 500


def test_vertical_line_peaks_at_0_degrees():
    bitmap = np.zeros((500, 500), dtype=np.uint8)
    bitmap[50, :] = 1

    result = hough_transform(bitmap)

    assert peak(result) == (50, 0)
    assert result.accumulator[50, 0] == 500


def test_diagonal_line_peaks_at_distance_zero():
    bitmap = np.zeros((200, 200), dtype=np.uint8)
    idx = np.arange(200)
    bitmap[idx, idx] = 1

    d, ang = peak(hough_transform(bitmap))

    assert d == 0
    assert ang in (134, 135, 136, 314, 315, 316)


def test_single_cell_votes():
    bitmap = np.zeros((10, 10), dtype=np.uint8)
    bitmap[0, 0] = 1

    result = hough_transform(bitmap)

    # The origin has d = 0 at every angle
    assert result.total_votes == 360
    assert (result.accumulator[0] == 1).all()


def test_votes_counted_and_non_negative():
    rng = np.random.default_rng(1)
    bitmap = (rng.random((60, 60)) > 0.9).astype(np.uint8)

    result = hough_transform(bitmap)

    assert (result.accumulator >= 0).all()
    assert result.total_votes == int(result.accumulator.sum())
    # Each lit cell votes at most once per angle
    assert result.total_votes <= int(bitmap.sum()) * 360
    assert result.median == result.total_votes / result.accumulator.size


def test_votes_are_additive_across_chunks():
    # 10 000 lit cells span several internal chunks
    bitmap = np.ones((100, 100), dtype=np.uint8)
    top = bitmap.copy()
    top[50:] = 0
    bottom = bitmap.copy()
    bottom[:50] = 0

    full = hough_transform(bitmap).accumulator
    halves = hough_transform(top).accumulator + hough_transform(bottom).accumulator

    assert np.array_equal(full, halves)


def test_custom_angle_buckets():
    bitmap = np.zeros((20, 20), dtype=np.uint8)
    bitmap[5, 5] = 1
    result = hough_transform(bitmap, angle_buckets=180)
    assert result.accumulator.shape == (max_distance(20, 20), 180)
