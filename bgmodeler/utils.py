"""Helpers for loading frames and writing images."""
from __future__ import annotations

from typing import Iterator

import imageio.v2 as imageio
import numpy as np


def _ensure_frame(frame: np.ndarray) -> np.ndarray:
    arr = np.asarray(frame)
    if arr.ndim == 3 and arr.shape[2] == 1:
        arr = arr[..., 0]
    if arr.ndim == 3 and arr.shape[2] == 4:
        # Drop alpha
        arr = arr[..., :3]
    if arr.ndim == 2 or (arr.ndim == 3 and arr.shape[2] == 3):
        if arr.dtype == np.uint16:
            arr = arr >> 8
        elif arr.dtype != np.uint8:
            raise ValueError(f"Unsupported frame dtype: {arr.dtype} (expected uint8 or uint16)")
        return arr.astype(np.uint8, copy=False)
    raise ValueError(f"Unsupported frame shape: {arr.shape}")


def read_frames(path: str, max_frames: int | None = None) -> Iterator[np.ndarray]:
    """
    Yield uint8 frames (H, W) or (H, W, 3) from a video or image sequence,
    in decoding order.
    """
    reader = imageio.get_reader(path)
    try:
        for idx, frame in enumerate(reader):
            if max_frames is not None and idx >= max_frames:
                break
            yield _ensure_frame(frame)
    finally:
        reader.close()


def save_image(image: np.ndarray, path: str) -> None:
    if image.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 image, got {image.dtype}")
    imageio.imwrite(path, image)
