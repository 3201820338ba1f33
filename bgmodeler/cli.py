"""Command-line entrypoint for the background modeler."""
from __future__ import annotations

import argparse

from .constants import DEFAULT_GRANULARITY, DEFAULT_N_PARAM, DEFAULT_S_PARAM, DEFAULT_THRESHOLD
from .estimate import estimate_background
from .preview import LivePreview
from .version import get_version_string


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate the static background of a video from its low-motion samples"
    )
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.add_argument("-i", "--input", help="Path to the input sequence")
    parser.add_argument("-o", "--output", help="Path to the output folder")
    parser.add_argument("-s", "--s-parameter", type=int, default=None, help="Value of the S parameter")
    parser.add_argument("-n", "--n-parameter", type=int, default=None, help="Value of the N parameter")
    parser.add_argument(
        "-d",
        "--default",
        action="store_true",
        help=f"Use the default set of parameters (S={DEFAULT_S_PARAM}, N={DEFAULT_N_PARAM})",
    )
    parser.add_argument("-v", "--visualization", action="store_true", help="Enable visualization")
    parser.add_argument(
        "--granularity", type=int, default=DEFAULT_GRANULARITY, help="Region side in pixels (1 = per pixel)"
    )
    parser.add_argument(
        "--threshold", type=int, default=DEFAULT_THRESHOLD, help="Raw difference above which a pixel is moving"
    )
    parser.add_argument("--workers", type=int, default=1, help="Threads used for history insertion")
    parser.add_argument("--max-frames", type=int, default=None, help="Limit number of frames processed")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(get_version_string())
        return

    if not args.input:
        parser.error("You must provide the path of the input sequence!")
    if not args.output:
        parser.error("You must provide the path of the output folder!")

    if args.default:
        s_param, n_param = DEFAULT_S_PARAM, DEFAULT_N_PARAM
    else:
        if args.s_parameter is None:
            parser.error("You must provide the S parameter!")
        if args.s_parameter < 1:
            parser.error("The S parameter must be positive!")
        if args.n_parameter is None:
            parser.error("You must provide the N parameter!")
        if args.n_parameter < 1:
            parser.error("The N parameter must be positive!")
        s_param, n_param = args.s_parameter, args.n_parameter

    if args.granularity < 1:
        parser.error("The region granularity must be positive!")
    if args.threshold < 0:
        parser.error("The motion threshold must be non-negative!")
    if args.workers < 1:
        parser.error("The number of workers must be positive!")
    if args.max_frames is not None and args.max_frames < 1:
        parser.error("The maximum number of frames must be positive!")

    preview = LivePreview() if args.visualization else None
    print(f" Visualization: {args.visualization}")

    estimate_background(
        args.input,
        args.output,
        s_param=s_param,
        n_param=n_param,
        granularity=args.granularity,
        threshold=args.threshold,
        workers=args.workers,
        max_frames=args.max_frames,
        preview=preview,
    )

    if preview is not None:
        preview.close(hold=True)


if __name__ == "__main__":
    main()
