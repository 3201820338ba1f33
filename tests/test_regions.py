from __future__ import annotations

import numpy as np
import pytest

from bgmodeler.errors import ConfigurationError, DimensionMismatch
from bgmodeler.regions import block_regions, make_partition, pixel_regions


def test_block_regions_partition_exactly():
    regions = block_regions(5, 7, 3)
    assert regions.count == 2 * 3
    assert regions.sizes().sum() == 5 * 7
    assert sorted(np.unique(regions.labels).tolist()) == list(range(regions.count))
    assert regions.sizes().tolist() == [9, 9, 3, 6, 6, 2]


def test_block_reduce_and_broadcast():
    regions = block_regions(2, 4, 2)
    frame = np.zeros((2, 4, 3), dtype=np.uint8)
    frame[:, :2] = [10, 20, 30]
    frame[0, 2:] = [0, 0, 0]
    frame[1, 2:] = [3, 3, 3]
    values = regions.reduce_values(frame)
    assert values.tolist() == [[10, 20, 30], [2, 2, 2]]

    scores = regions.reduce_scores(np.array([[1, 0, 2, 2], [0, 1, 0, 5]], dtype=np.uint8))
    assert scores.tolist() == [2, 9]

    image = regions.broadcast(values)
    assert image.shape == (2, 4, 3)
    assert image[1, 3].tolist() == [2, 2, 2]


def test_pixel_regions_are_identity():
    regions = pixel_regions(3, 2)
    frame = np.arange(18, dtype=np.uint8).reshape(3, 2, 3)
    assert np.array_equal(regions.broadcast(regions.reduce_values(frame)), frame)


def test_partition_checks():
    assert make_partition(1) is pixel_regions
    assert make_partition(4)(8, 8).count == 4
    with pytest.raises(ConfigurationError):
        make_partition(0)
    with pytest.raises(DimensionMismatch):
        pixel_regions(3, 3).reduce_values(np.zeros((3, 4, 3), dtype=np.uint8))
