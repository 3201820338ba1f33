"""Bounded per-region history of low-motion candidate samples."""
from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass

import numpy as np

from .errors import ConfigurationError, DimensionMismatch, EmptyHistory
from .regions import Regions

_ORDER_DTYPE = np.int32
_ORDER_MAX = np.iinfo(_ORDER_DTYPE).max


@dataclass(frozen=True)
class Candidate:
    value: tuple[int, ...]
    score: int
    order: int


class PatchesHistory:
    """
    Keeps, for every region, the S candidates observed with the lowest motion
    scores.

    Insertion into a region holding fewer than S candidates always succeeds.
    Once full, the candidate with the highest score (the oldest one among equal
    scores) is evicted, but only when the new score is strictly lower. With a
    static scene every score ties, so the history stops changing after the
    first S samples and keeps those.

    Storage is three dense arrays of shape (regions, S[, C]) plus a per-region
    fill count; slots at index >= count are unused. Scores use ``score_dtype``
    (uint32 unless the caller knows a tighter bound) and insertion orders int32.
    """

    def __init__(
        self,
        regions: Regions,
        s_param: int,
        channels: int = 3,
        dtype=np.uint8,
        score_dtype=np.uint32,
    ):
        if s_param < 1:
            raise ConfigurationError("The S parameter must be positive")
        if channels < 1:
            raise ConfigurationError("Channel count must be positive")
        self.regions = regions
        self.capacity = int(s_param)
        self.channels = int(channels)
        self.dtype = np.dtype(dtype)
        self.score_dtype = np.dtype(score_dtype)
        R = regions.count
        self._values = np.zeros((R, self.capacity, self.channels), dtype=self.dtype)
        self._scores = np.zeros((R, self.capacity), dtype=self.score_dtype)
        self._order = np.zeros((R, self.capacity), dtype=_ORDER_DTYPE)
        self._count = np.zeros((R,), dtype=np.int32)
        self._clock = 0

    def __len__(self) -> int:
        return self.regions.count

    def sizes(self) -> np.ndarray:
        return self._count.copy()

    def _next_order(self) -> int:
        if self._clock >= _ORDER_MAX:
            raise OverflowError("Insertion order exhausted")
        order = self._clock
        self._clock += 1
        return order

    def _insert_range(
        self, start: int, stop: int, values: np.ndarray, scores: np.ndarray, order: int
    ) -> None:
        # Views into the owned arrays; ranges handed to different workers never overlap.
        vals = self._values[start:stop]
        sc = self._scores[start:stop]
        ordr = self._order[start:stop]
        cnt = self._count[start:stop]
        S = self.capacity

        is_full = cnt >= S
        open_rows = np.nonzero(~is_full)[0]
        full_rows = np.nonzero(is_full)[0]

        if open_rows.size:
            slots = cnt[open_rows]
            vals[open_rows, slots] = values[open_rows]
            sc[open_rows, slots] = scores[open_rows]
            ordr[open_rows, slots] = order
            cnt[open_rows] += 1

        if full_rows.size:
            held = sc[full_rows]
            worst_score = held.max(axis=1)
            tied_order = np.where(held == worst_score[:, None], ordr[full_rows], _ORDER_MAX)
            worst_slot = tied_order.argmin(axis=1)
            admit = scores[full_rows] < worst_score
            rows = full_rows[admit]
            slots = worst_slot[admit]
            vals[rows, slots] = values[rows]
            sc[rows, slots] = scores[rows]
            ordr[rows, slots] = order

    def _check_values(self, values: np.ndarray, n: int) -> np.ndarray:
        arr = np.asarray(values)
        if arr.ndim == 1 and self.channels == 1:
            arr = arr[:, None]
        if arr.shape != (n, self.channels):
            raise DimensionMismatch(
                f"Expected values of shape {(n, self.channels)}, got {arr.shape}"
            )
        return arr.astype(self.dtype, copy=False)

    def _check_scores(self, scores, n: int) -> np.ndarray:
        arr = np.asarray(scores).reshape(-1)
        if arr.shape[0] != n:
            raise DimensionMismatch(f"Expected {n} scores, got {arr.shape[0]}")
        if arr.size and (arr.min() < 0 or arr.max() > np.iinfo(self.score_dtype).max):
            raise ValueError(f"Scores must lie in [0, {np.iinfo(self.score_dtype).max}]")
        return arr.astype(self.score_dtype, copy=False)

    def insert(self, region: int, value, score: int) -> None:
        """Offer a single candidate to one region."""
        if not 0 <= region < self.regions.count:
            raise IndexError(f"Region {region} out of range")
        vals = self._check_values(np.asarray(value).reshape(1, -1), 1)
        scores = self._check_scores([score], 1)
        self._insert_range(region, region + 1, vals, scores, self._next_order())

    def insert_frame(
        self,
        values: np.ndarray,
        scores: np.ndarray,
        executor: Executor | None = None,
        chunks: int = 1,
    ) -> None:
        """
        Offer one candidate to every region. All candidates of the frame share
        one insertion order. With an executor, disjoint region ranges are
        processed concurrently and joined before returning.
        """
        R = self.regions.count
        vals = self._check_values(values, R)
        sc = self._check_scores(scores, R)
        order = self._next_order()

        if executor is None or chunks <= 1:
            self._insert_range(0, R, vals, sc, order)
            return

        bounds = np.linspace(0, R, min(chunks, R) + 1).astype(np.int64)
        futures = [
            executor.submit(self._insert_range, int(a), int(b), vals[a:b], sc[a:b], order)
            for a, b in zip(bounds[:-1], bounds[1:])
            if b > a
        ]
        for fut in futures:
            fut.result()

    def candidates(self, region: int) -> list[Candidate]:
        """Candidates held by ``region``, oldest first."""
        n = int(self._count[region])
        idx = np.argsort(self._order[region, :n], kind="stable")
        return [
            Candidate(
                value=tuple(int(v) for v in self._values[region, i]),
                score=int(self._scores[region, i]),
                order=int(self._order[region, i]),
            )
            for i in idx
        ]

    def medians(self) -> np.ndarray:
        """
        Channel-wise median of each region's candidates as a (regions, C)
        array. For an even number of candidates the lower middle value is used,
        so the result is always a value that was actually observed.
        """
        empty = int(np.count_nonzero(self._count == 0))
        if empty:
            raise EmptyHistory(f"{empty} region(s) hold no candidates")
        data = self._values.copy()
        unused = np.arange(self.capacity)[None, :] >= self._count[:, None]
        # Unused slots sort to the end and are never selected.
        data[unused] = np.iinfo(self.dtype).max
        data.sort(axis=1)
        mid = (self._count - 1) // 2
        return data[np.arange(self.regions.count), mid]

    def aggregate(self) -> np.ndarray:
        """Full-resolution (H, W, C) background estimate from the current contents."""
        return self.regions.broadcast(self.medians())
