from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from bgmodeler import __version__
from bgmodeler.cli import main


def test_version_flag(capsys):
    main(["--version"])
    out = capsys.readouterr().out.strip()
    assert out.startswith(f"bgmodeler {__version__}")


def test_module_entrypoint_outputs_version():
    repo_root = Path(__file__).resolve().parents[1]
    proc = subprocess.run(
        [sys.executable, "-m", "bgmodeler", "--version"],
        cwd=repo_root,
        capture_output=True,
        text=True,
        check=True,
    )
    out = (proc.stdout or "").strip()
    assert out.startswith(f"bgmodeler {__version__}"), f"unexpected version output: {out}"
