"""Estimate the background of a video with explicit S/N parameters."""
from __future__ import annotations

import argparse

from bgmodeler import DEFAULT_N_PARAM, DEFAULT_S_PARAM, estimate_background


def main():
    parser = argparse.ArgumentParser(description="Motion-aware background estimation")
    parser.add_argument("input", help="Input video path")
    parser.add_argument("output", help="Output folder")
    parser.add_argument("-s", type=int, default=DEFAULT_S_PARAM, help="Candidates kept per pixel")
    parser.add_argument("-n", type=int, default=DEFAULT_N_PARAM, help="Divisor of min(H, W) for the motion window")
    parser.add_argument("--tiling", type=int, default=1, help="Region side in pixels")
    parser.add_argument("--max-frames", type=int, default=None, help="Limit number of frames processed")
    args = parser.parse_args()

    estimate_background(
        args.input,
        args.output,
        s_param=args.s,
        n_param=args.n,
        granularity=args.tiling,
        max_frames=args.max_frames,
    )


if __name__ == "__main__":
    main()
