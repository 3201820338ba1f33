"""Estimate a background while watching the motion maps update."""
from __future__ import annotations

import argparse

from bgmodeler import estimate_background
from bgmodeler.preview import LivePreview


def main():
    parser = argparse.ArgumentParser(description="Background estimation with live preview")
    parser.add_argument("input", help="Input video path")
    parser.add_argument("output", help="Output folder")
    parser.add_argument("--every", type=int, default=5, help="Refresh the view every N frames")
    args = parser.parse_args()

    preview = LivePreview(every=args.every)
    estimate_background(args.input, args.output, preview=preview)
    preview.close(hold=True)


if __name__ == "__main__":
    main()
