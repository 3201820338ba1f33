from __future__ import annotations

import numpy as np
import pytest

from bgmodeler.difference import FrameDifference
from bgmodeler.errors import ConfigurationError, DimensionMismatch
from bgmodeler.motion import MotionProbabilityFilter, kernel_size, oddify, score_dtype


def test_oddify_rounds_down():
    assert oddify(4) == 3
    assert oddify(5) == 5
    assert oddify(0) == -1


@pytest.mark.parametrize("H", [1, 2, 3, 10, 17, 240])
@pytest.mark.parametrize("W", [1, 4, 9, 320])
@pytest.mark.parametrize("N", [1, 2, 3, 7, 1000])
def test_kernel_is_odd_and_positive(H, W, N):
    K = kernel_size(H, W, N)
    assert K >= 1
    assert K % 2 == 1


def test_kernel_examples():
    assert kernel_size(240, 320, 3) == 79
    assert kernel_size(240, 320, 10) == 23
    assert kernel_size(10, 10, 20) == 1


def test_kernel_rejects_bad_n():
    with pytest.raises(ConfigurationError):
        kernel_size(10, 10, 0)


def test_score_dtype_fits_window_area():
    assert score_dtype(15) == np.uint8
    assert score_dtype(17) == np.uint16
    assert score_dtype(257) == np.uint32
    filt = MotionProbabilityFilter(17)
    assert filt.compute(np.ones((20, 20), dtype=np.int32)).dtype == np.uint16


def test_even_kernel_rejected():
    with pytest.raises(ConfigurationError):
        MotionProbabilityFilter(4)


def test_border_clamping_counts_valid_neighbours():
    filt = MotionProbabilityFilter(3)
    scores = filt.compute(np.ones((5, 5), dtype=np.int32))
    assert scores[0, 0] == 4
    assert scores[0, 2] == 6
    assert scores[2, 2] == 9

    filt = MotionProbabilityFilter(5)
    scores = filt.compute(np.ones((7, 7), dtype=np.int32))
    assert scores[1, 1] == 16
    assert scores[3, 3] == 25
    assert scores.max() <= 25


def test_filter_counts_moving_pixels_only():
    raw = np.zeros((6, 6), dtype=np.int32)
    raw[2, 2] = 50
    raw[2, 3] = 1
    filt = MotionProbabilityFilter(3)
    scores = filt.compute(raw)
    assert scores[2, 2] == 2
    assert scores[0, 0] == 0
    assert scores[1, 4] == 1

    strict = MotionProbabilityFilter(3, threshold=10)
    assert strict.compute(raw)[2, 3] == 1


def test_filter_rejects_non_2d_maps():
    with pytest.raises(DimensionMismatch):
        MotionProbabilityFilter(3).compute(np.zeros((4, 4, 3)))


def test_frame_difference_is_l1():
    prev = np.zeros((2, 2, 3), dtype=np.uint8)
    cur = np.zeros((2, 2, 3), dtype=np.uint8)
    cur[0, 0] = [10, 20, 30]
    prev[1, 1] = [255, 0, 0]
    raw = FrameDifference().compute(prev, cur)
    assert raw.tolist() == [[60, 0], [0, 255]]


def test_frame_difference_grayscale_and_mismatch():
    diff = FrameDifference()
    a = np.full((3, 3), 5, dtype=np.uint8)
    b = np.full((3, 3), 2, dtype=np.uint8)
    assert np.all(diff.compute(a, b) == 3)
    with pytest.raises(DimensionMismatch):
        diff.compute(a, np.zeros((3, 4), dtype=np.uint8))
