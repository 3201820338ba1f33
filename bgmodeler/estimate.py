"""End-to-end background estimation from a video file to a PNG image."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .constants import (
    DEFAULT_GRANULARITY,
    DEFAULT_S_PARAM,
    DEFAULT_N_PARAM,
    DEFAULT_THRESHOLD,
    OUTPUT_TEMPLATE,
)
from .modeler import BackgroundModeler, PreviewHook
from .regions import make_partition
from .utils import read_frames, save_image


def output_path_for(output_dir: str | Path, s_param: int, n_param: int) -> Path:
    return Path(output_dir) / OUTPUT_TEMPLATE.format(s=s_param, n=n_param)


def estimate_background(
    input_path: str,
    output_dir: str,
    s_param: int = DEFAULT_S_PARAM,
    n_param: int = DEFAULT_N_PARAM,
    granularity: int = DEFAULT_GRANULARITY,
    threshold: int = DEFAULT_THRESHOLD,
    workers: int = 1,
    max_frames: int | None = None,
    preview: Optional[PreviewHook] = None,
) -> Path:
    """
    Decode ``input_path``, estimate its background and write it to
    ``output_dir/output_<S>_<N>.png``. Returns the written path.
    """
    modeler = BackgroundModeler(
        s_param,
        n_param,
        partition=make_partition(granularity),
        threshold=threshold,
        workers=workers,
        preview=preview,
    )
    out_dir = Path(output_dir)
    if not out_dir.is_dir():
        raise ValueError(f"Output folder does not exist: {output_dir}")

    print(f"Input sequence: {input_path}")
    print(f"   Output path: {output_dir}")
    print(f"             S: {s_param}")
    print(f"             N: {n_param}")

    frames = read_frames(input_path, max_frames=max_frames)
    first = next(frames, None)
    if first is None:
        raise ValueError(f"No frames found in input: {input_path}")
    H, W = first.shape[:2]
    print(f"Reading sequence {input_path} ({H}x{W})...")

    modeler.feed(first)
    print(f"Size of the kernel: {modeler.kernel}")
    print("Skipping first frame...")
    background = modeler.run(frames)

    out_path = output_path_for(out_dir, s_param, n_param)
    print(f"{modeler.frames_processed + 1} frames processed. Writing {out_path}...")
    save_image(background, str(out_path))
    return out_path
