"""Package version plus the git revision of the working tree, when there is one."""
from __future__ import annotations

import subprocess
from functools import lru_cache
from pathlib import Path
from typing import Dict

__version__ = "0.1.0"

_PACKAGE_DIR = Path(__file__).resolve().parent


def _git_output(*args: str) -> str | None:
    try:
        proc = subprocess.run(["git", *args], cwd=_PACKAGE_DIR, capture_output=True, text=True)
    except OSError:
        return None
    return proc.stdout.strip() if proc.returncode == 0 else None


@lru_cache(maxsize=1)
def get_build_meta() -> Dict[str, str]:
    """Version, short commit hash ("unknown" outside a checkout) and dirty flag."""
    return {
        "version": __version__,
        "git_hash": _git_output("rev-parse", "--short", "HEAD") or "unknown",
        "dirty": "1" if _git_output("status", "--porcelain") else "0",
    }


def get_version_string() -> str:
    meta = get_build_meta()
    suffix = "+dirty" if meta["dirty"] == "1" else ""
    return f"bgmodeler {meta['version']} ({meta['git_hash']}{suffix})"
