"""Spatial smoothing of the raw motion indicator into per-pixel motion scores."""
from __future__ import annotations

import numpy as np

from .constants import DEFAULT_THRESHOLD
from .errors import ConfigurationError, DimensionMismatch


def oddify(x: int) -> int:
    """Round ``x`` down to the nearest odd value."""
    return x if x & 1 else x - 1


def kernel_size(height: int, width: int, n_param: int) -> int:
    """Window side K = max(1, oddify(min(H, W) // N)); always odd and >= 1."""
    if n_param < 1:
        raise ConfigurationError("The N parameter must be positive")
    if height < 1 or width < 1:
        raise ConfigurationError(f"Frame dimensions must be positive, got {height}x{width}")
    return max(1, oddify(min(height, width) // n_param))


def smallest_unsigned(bound: int) -> np.dtype:
    """Smallest unsigned integer dtype holding values up to ``bound``."""
    for dt in (np.uint8, np.uint16, np.uint32):
        if bound <= np.iinfo(dt).max:
            return np.dtype(dt)
    return np.dtype(np.uint64)


def score_dtype(kernel: int) -> np.dtype:
    """Smallest unsigned dtype that holds a full K x K count."""
    return smallest_unsigned(kernel * kernel)


def _window_bounds(n: int, radius: int) -> tuple[np.ndarray, np.ndarray]:
    centers = np.arange(n)
    lo = np.clip(centers - radius, 0, n)
    hi = np.clip(centers + radius + 1, 0, n)
    return lo, hi


class MotionProbabilityFilter:
    """
    Counts moving pixels (raw value above ``threshold``) in the K x K window
    centred on each location. Windows crossing the frame edge only see their
    in-bounds part, so a border score never exceeds the number of valid
    neighbours.
    """

    def __init__(self, kernel: int, threshold: int = DEFAULT_THRESHOLD):
        if kernel < 1 or kernel % 2 == 0:
            raise ConfigurationError(f"Kernel size must be odd and positive, got {kernel}")
        if threshold < 0:
            raise ConfigurationError("Motion threshold must be non-negative")
        self.kernel = int(kernel)
        self.radius = self.kernel // 2
        self.threshold = threshold
        self.dtype = score_dtype(self.kernel)

    @classmethod
    def for_frame(
        cls, height: int, width: int, n_param: int, threshold: int = DEFAULT_THRESHOLD
    ) -> "MotionProbabilityFilter":
        return cls(kernel_size(height, width, n_param), threshold=threshold)

    def compute(self, raw_map: np.ndarray) -> np.ndarray:
        raw = np.asarray(raw_map)
        if raw.ndim != 2:
            raise DimensionMismatch(f"Raw motion map must be 2-D, got shape {raw.shape}")
        H, W = raw.shape
        moving = (raw > self.threshold).astype(np.int64)

        # Summed-area table padded with a leading zero row and column.
        sat = np.zeros((H + 1, W + 1), dtype=np.int64)
        sat[1:, 1:] = moving.cumsum(axis=0).cumsum(axis=1)

        y0, y1 = _window_bounds(H, self.radius)
        x0, x1 = _window_bounds(W, self.radius)
        counts = (
            sat[np.ix_(y1, x1)]
            - sat[np.ix_(y0, x1)]
            - sat[np.ix_(y1, x0)]
            + sat[np.ix_(y0, x0)]
        )
        return counts.astype(self.dtype)
