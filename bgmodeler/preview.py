"""Matplotlib live view of the modeler's intermediate maps."""
from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np


class LivePreview:
    """
    Observer for ``BackgroundModeler(preview=...)``. Shows the input frame, the
    raw motion map, the motion scores and the running background. Only reads
    the arrays it is given.
    """

    titles = ("Input video", "Probability map", "Filtered probability map", "Estimated background")

    def __init__(self, pause: float = 0.001, every: int = 1):
        if pause <= 0:
            # plt.pause treats a non-positive interval as "wait forever".
            raise ValueError(f"pause must be positive, got {pause}")
        if every < 1:
            raise ValueError(f"every must be >= 1, got {every}")
        self.pause = pause
        self.every = int(every)
        self.shown = 0
        self._calls = 0
        self._fig = None
        self._images = None

    def _setup(self, panels: list[np.ndarray]) -> None:
        plt.ion()
        self._fig, axes = plt.subplots(2, 2, figsize=(10, 8))
        self._images = []
        for ax, title, arr in zip(axes.ravel(), self.titles, panels):
            cmap = "gray" if arr.ndim == 2 else None
            self._images.append(ax.imshow(arr, cmap=cmap))
            ax.set_title(title)
            ax.axis("off")
        self._fig.tight_layout()

    def __call__(self, frame, raw_map, score_map, background) -> None:
        self._calls += 1
        if self._calls % self.every:
            return
        panels = [frame, raw_map, score_map, background]
        if self._fig is None:
            self._setup(panels)
        else:
            for im, arr in zip(self._images, panels):
                im.set_data(arr)
                if arr.ndim == 2:
                    im.set_clim(0, max(1, int(arr.max())))
        self.shown += 1
        plt.pause(self.pause)

    def close(self, hold: bool = False) -> None:
        if self._fig is None:
            return
        if hold:
            plt.ioff()
            print("Close the preview window to quit...")
            plt.show()
        plt.close(self._fig)
        self._fig = None
        self._images = None
