"""Per-frame pipeline: difference -> motion filter -> history insertion."""
from __future__ import annotations

import warnings
from concurrent.futures import Executor, ThreadPoolExecutor
from enum import Enum
from typing import Callable, Iterable, Optional

import numpy as np

from .constants import DEFAULT_THRESHOLD
from .difference import FrameDifference
from .errors import ConfigurationError, DimensionMismatch
from .history import PatchesHistory
from .motion import MotionProbabilityFilter, smallest_unsigned
from .regions import Regions, pixel_regions
from .utils import _ensure_frame

PreviewHook = Callable[[np.ndarray, np.ndarray, np.ndarray, np.ndarray], None]


class ModelerState(Enum):
    AWAITING_FIRST_FRAME = "awaiting_first_frame"
    PROCESSING = "processing"


def _as_frame(frame) -> np.ndarray:
    arr = _ensure_frame(frame)
    return arr[..., None] if arr.ndim == 2 else arr


class BackgroundModeler:
    """
    Runs the motion-aware background estimation over one frame sequence.

    The first frame only becomes the reference for differencing; it is never
    offered to the history. Every later frame is differenced against its
    predecessor, smoothed into motion scores and inserted region by region.
    ``background()`` can be called at any point after the second frame and
    returns the estimate for the frames seen so far.

    A modeler is good for exactly one sequence.
    """

    def __init__(
        self,
        s_param: int,
        n_param: int,
        partition: Callable[[int, int], Regions] = pixel_regions,
        threshold: int = DEFAULT_THRESHOLD,
        workers: int = 1,
        preview: Optional[PreviewHook] = None,
    ):
        if s_param is None or n_param is None:
            raise ConfigurationError("Both the S and N parameters are required")
        if s_param < 1:
            raise ConfigurationError("The S parameter must be positive")
        if n_param < 1:
            raise ConfigurationError("The N parameter must be positive")
        if workers < 1:
            raise ConfigurationError("workers must be >= 1")
        if threshold < 0:
            raise ConfigurationError("Motion threshold must be non-negative")
        self.s_param = int(s_param)
        self.n_param = int(n_param)
        self.partition = partition
        self.threshold = threshold
        self.workers = int(workers)
        self.preview = preview

        self.state = ModelerState.AWAITING_FIRST_FRAME
        self.frames_processed = 0
        self.regions: Regions | None = None
        self.history: PatchesHistory | None = None
        self.filter: MotionProbabilityFilter | None = None
        self.difference = FrameDifference()
        self._previous: np.ndarray | None = None
        self._grayscale = False
        self._aborted: Exception | None = None

    @property
    def shape(self) -> tuple[int, int, int] | None:
        return None if self._previous is None else self._previous.shape

    @property
    def kernel(self) -> int | None:
        return None if self.filter is None else self.filter.kernel

    def _check_alive(self) -> None:
        if self._aborted is not None:
            raise RuntimeError("Run aborted; start a new modeler") from self._aborted

    def _abort(self, exc: Exception) -> None:
        # A failed run keeps no state that could pass for a valid result.
        self._aborted = exc
        self.history = None
        self._previous = None

    def _start(self, frame: np.ndarray, grayscale: bool) -> None:
        H, W, C = frame.shape
        self.regions = self.partition(H, W)
        if (self.regions.height, self.regions.width) != (H, W):
            raise DimensionMismatch(
                f"Partition covers {self.regions.height}x{self.regions.width}, frame is {H}x{W}"
            )
        self.filter = MotionProbabilityFilter.for_frame(H, W, self.n_param, self.threshold)
        # Worst-case region score: every pixel of the largest region sees a full window.
        max_score = self.filter.kernel ** 2 * int(self.regions.sizes().max())
        self.history = PatchesHistory(
            self.regions, self.s_param, channels=C, score_dtype=smallest_unsigned(max_score)
        )
        self._grayscale = grayscale
        self._previous = frame
        self.state = ModelerState.PROCESSING

    def feed(self, frame, executor: Executor | None = None) -> None:
        """Advance the pipeline by one frame."""
        self._check_alive()
        grayscale = np.ndim(frame) == 2
        current = _as_frame(frame)

        if self.state is ModelerState.AWAITING_FIRST_FRAME:
            self._start(current, grayscale)
            return

        if current.shape != self._previous.shape:
            exc = DimensionMismatch(
                f"Frame {self.frames_processed + 1} has shape {current.shape}, "
                f"expected {self._previous.shape}"
            )
            self._abort(exc)
            raise exc

        raw = self.difference.compute(self._previous, current)
        scores = self.filter.compute(raw)
        self.history.insert_frame(
            self.regions.reduce_values(current),
            self.regions.reduce_scores(scores),
            executor=executor,
            chunks=min(self.workers, self.regions.count),
        )
        self._previous = current
        self.frames_processed += 1

        if self.preview is not None:
            self.preview(self._restore_layout(current), raw, scores, self.background())

    def _restore_layout(self, image: np.ndarray) -> np.ndarray:
        return image[..., 0] if self._grayscale else image

    def background(self) -> np.ndarray:
        """Current background estimate, in the channel layout of the input frames."""
        self._check_alive()
        if self.history is None:
            raise RuntimeError("No frame has been fed yet")
        return self._restore_layout(self.history.aggregate())

    def run(self, frames: Iterable) -> np.ndarray:
        """Feed every frame in order and return the final background."""
        if self.workers == 1:
            for frame in frames:
                self.feed(frame)
            return self.background()

        warned = False
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            for frame in frames:
                self.feed(frame, executor=pool)
                if not warned and self.regions.count < self.workers:
                    warnings.warn(
                        f"workers={self.workers} exceeds region count {self.regions.count}"
                    )
                    warned = True
        return self.background()
