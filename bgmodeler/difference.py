"""Raw per-pixel motion indicator between consecutive frames."""
from __future__ import annotations

import numpy as np

from .errors import DimensionMismatch


class FrameDifference:
    """
    L1 frame difference: for every pixel, the sum over channels of
    |current - previous|. Grey frames give the plain absolute difference.
    """

    dtype = np.int32

    def compute(self, previous: np.ndarray, current: np.ndarray) -> np.ndarray:
        prev = np.asarray(previous)
        cur = np.asarray(current)
        if prev.shape != cur.shape:
            raise DimensionMismatch(f"Frame shape mismatch: {prev.shape} vs {cur.shape}")
        diff = np.abs(cur.astype(self.dtype) - prev.astype(self.dtype))
        if diff.ndim == 3:
            return diff.sum(axis=2, dtype=self.dtype)
        if diff.ndim == 2:
            return diff
        raise DimensionMismatch(f"Unsupported frame shape: {cur.shape}")
