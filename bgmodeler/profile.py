from __future__ import annotations

import argparse
import json
import sys
import time
import tracemalloc
from pathlib import Path
from typing import Optional

try:
    import psutil
except ImportError:  # pragma: no cover
    psutil = None

from .constants import DEFAULT_N_PARAM, DEFAULT_S_PARAM
from .estimate import estimate_background
from .version import get_version_string


def current_rss_mb() -> float:
    if psutil is None:
        return 0.0
    proc = psutil.Process()
    return proc.memory_info().rss / (1024 * 1024)


def run_profile(
    input_path: Path,
    out_dir: Path,
    s_param: int = DEFAULT_S_PARAM,
    n_param: int = DEFAULT_N_PARAM,
    workers: int = 1,
) -> dict:
    out_dir.mkdir(parents=True, exist_ok=True)
    result = {}

    tracemalloc.start()
    rss_start = current_rss_mb()
    t0 = time.perf_counter()
    out_path = estimate_background(str(input_path), str(out_dir), s_param, n_param, workers=workers)
    t1 = time.perf_counter()
    rss_end = current_rss_mb()
    _, peak_size = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    result["estimate_time_sec"] = t1 - t0
    result["s_param"] = s_param
    result["n_param"] = n_param
    result["workers"] = workers
    result["output"] = str(out_path)
    result["rss_start_mb"] = rss_start
    result["rss_end_mb"] = rss_end
    result["tracemalloc_peak_bytes"] = peak_size
    result["psutil_available"] = psutil is not None

    result["env"] = {
        "python": sys.version,
        "platform": sys.platform,
        "git": get_version_string(),
    }

    with open(out_dir / "profile.json", "w", encoding="utf-8") as f:
        json.dump(result, f, indent=2)
    return result


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Profile background estimation")
    parser.add_argument("--input", type=Path, required=True, help="Input video")
    parser.add_argument("--out", type=Path, required=True, help="Output directory for profile")
    parser.add_argument("-s", type=int, default=DEFAULT_S_PARAM, help="S parameter")
    parser.add_argument("-n", type=int, default=DEFAULT_N_PARAM, help="N parameter")
    parser.add_argument("--workers", type=int, default=1)
    args = parser.parse_args(argv)

    res = run_profile(args.input, args.out, args.s, args.n, args.workers)
    print(json.dumps(res, indent=2))


if __name__ == "__main__":
    main()
