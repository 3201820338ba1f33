"""Spatial partitioning of a frame into regions tracked by the history."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from .errors import ConfigurationError, DimensionMismatch


@dataclass(frozen=True, eq=False)
class Regions:
    """
    Exact partition of an H x W frame. ``labels[y, x]`` is the index of the
    region owning pixel (y, x); indices run over ``0..count-1``.
    """

    height: int
    width: int
    granularity: int
    labels: np.ndarray
    count: int

    @property
    def is_pixel_level(self) -> bool:
        return self.granularity == 1

    def sizes(self) -> np.ndarray:
        """Number of pixels in each region."""
        return np.bincount(self.labels.reshape(-1), minlength=self.count)

    def _check_shape(self, arr: np.ndarray) -> None:
        if arr.shape[:2] != (self.height, self.width):
            raise DimensionMismatch(
                f"Expected {self.height}x{self.width}, got {arr.shape[0]}x{arr.shape[1]}"
            )

    def reduce_values(self, frame: np.ndarray) -> np.ndarray:
        """Return one (C,) value per region as a (count, C) array of the frame's dtype."""
        arr = np.asarray(frame)
        self._check_shape(arr)
        if arr.ndim == 2:
            arr = arr[..., None]
        C = arr.shape[2]
        if self.is_pixel_level:
            return arr.reshape(-1, C)
        flat = arr.reshape(-1, C)
        idx = self.labels.reshape(-1)
        sums = np.zeros((self.count, C), dtype=np.float64)
        np.add.at(sums, idx, flat.astype(np.float64, copy=False))
        means = sums / self.sizes()[:, None]
        return np.clip(np.rint(means), 0, 255).astype(arr.dtype)

    def reduce_scores(self, score_map: np.ndarray) -> np.ndarray:
        """Return one score per region: the score itself, or the tile's total."""
        arr = np.asarray(score_map)
        self._check_shape(arr)
        if arr.ndim != 2:
            raise DimensionMismatch(f"Score map must be 2-D, got shape {arr.shape}")
        if self.is_pixel_level:
            return arr.reshape(-1).astype(np.int64)
        sums = np.zeros((self.count,), dtype=np.int64)
        np.add.at(sums, self.labels.reshape(-1), arr.reshape(-1).astype(np.int64))
        return sums

    def broadcast(self, region_values: np.ndarray) -> np.ndarray:
        """Expand (count, C) region values to a full (H, W, C) image."""
        values = np.asarray(region_values)
        if values.shape[0] != self.count:
            raise DimensionMismatch(
                f"Expected {self.count} region values, got {values.shape[0]}"
            )
        return values[self.labels]


def _tile_labels(H: int, W: int, tile: int) -> tuple[np.ndarray, int, int]:
    tiles_y = (H + tile - 1) // tile
    tiles_x = (W + tile - 1) // tile
    labels = np.zeros((H, W), dtype=np.int64)
    for ty in range(tiles_y):
        for tx in range(tiles_x):
            y0 = ty * tile
            x0 = tx * tile
            y1 = min(H, y0 + tile)
            x1 = min(W, x0 + tile)
            labels[y0:y1, x0:x1] = ty * tiles_x + tx
    return labels, tiles_y, tiles_x


def _check_dims(height: int, width: int) -> None:
    if height < 1 or width < 1:
        raise ConfigurationError(f"Frame dimensions must be positive, got {height}x{width}")


def pixel_regions(height: int, width: int) -> Regions:
    """One region per pixel."""
    _check_dims(height, width)
    labels = np.arange(height * width, dtype=np.int64).reshape(height, width)
    return Regions(height, width, 1, labels, height * width)


def block_regions(height: int, width: int, block: int) -> Regions:
    """Square tiles of side ``block``; edge tiles are clipped to the frame."""
    _check_dims(height, width)
    if block < 1:
        raise ConfigurationError("Block size must be >= 1")
    if block == 1:
        return pixel_regions(height, width)
    labels, tiles_y, tiles_x = _tile_labels(height, width, block)
    return Regions(height, width, block, labels, tiles_y * tiles_x)


def make_partition(granularity: int) -> Callable[[int, int], Regions]:
    if granularity < 1:
        raise ConfigurationError("Region granularity must be >= 1")
    if granularity == 1:
        return pixel_regions

    def partition(height: int, width: int) -> Regions:
        return block_regions(height, width, granularity)

    return partition
