from __future__ import annotations

import imageio.v2 as imageio
import numpy as np
import pytest

from bgmodeler import EmptyHistory, estimate_background
from bgmodeler.cli import main


def _scene(T: int = 16, H: int = 18, W: int = 24) -> np.ndarray:
    frames = np.zeros((T, H, W, 3), dtype=np.uint8)
    frames[..., 0] = 40
    frames[..., 1] = np.arange(W, dtype=np.uint8)[None, None, :] * 5
    frames[..., 2] = 160
    for t in range(8):
        frames[t, 4:9, 3 * t : 3 * t + 4] = [250, 250, 0]
    return frames


def _patch_reader(monkeypatch, frames):
    class FakeReader:
        closed = False

        def __iter__(self):
            for f in frames:
                yield f

        def close(self):
            FakeReader.closed = True

    def fake_get_reader(path):  # noqa: ARG001
        return FakeReader()

    monkeypatch.setattr("bgmodeler.utils.imageio.get_reader", fake_get_reader)
    return FakeReader


def test_estimate_writes_background_png(monkeypatch, tmp_path):
    frames = _scene()
    reader_cls = _patch_reader(monkeypatch, frames)

    out_path = estimate_background("dummy.mp4", str(tmp_path), s_param=3, n_param=4)

    assert out_path == tmp_path / "output_3_4.png"
    assert reader_cls.closed
    written = imageio.imread(out_path)
    assert written.shape == frames.shape[1:]
    assert np.array_equal(written, frames[-1])


def test_estimate_rejects_empty_input(monkeypatch, tmp_path):
    _patch_reader(monkeypatch, [])
    with pytest.raises(ValueError):
        estimate_background("dummy.mp4", str(tmp_path), s_param=3, n_param=3)


def test_single_frame_input_has_no_background(monkeypatch, tmp_path):
    _patch_reader(monkeypatch, _scene())
    with pytest.raises(EmptyHistory):
        estimate_background("dummy.mp4", str(tmp_path), s_param=2, n_param=3, max_frames=1)
    assert not (tmp_path / "output_2_3.png").exists()


def test_estimate_grayscale_and_rgba_inputs(monkeypatch, tmp_path):
    rgba = np.full((5, 6, 7, 4), 90, dtype=np.uint8)
    _patch_reader(monkeypatch, rgba)
    out_path = estimate_background("dummy.mp4", str(tmp_path), s_param=2, n_param=2)
    assert imageio.imread(out_path).shape == (6, 7, 3)

    gray = np.full((4, 6, 7), 33, dtype=np.uint8)
    _patch_reader(monkeypatch, gray)
    out_path = estimate_background("dummy.mp4", str(tmp_path), s_param=1, n_param=1)
    written = imageio.imread(out_path)
    assert written.shape == (6, 7)
    assert np.all(written == 33)


def test_cli_default_parameters(monkeypatch, tmp_path, capsys):
    _patch_reader(monkeypatch, _scene())
    main(["-i", "dummy.mp4", "-o", str(tmp_path), "-d"])
    assert (tmp_path / "output_19_3.png").exists()
    out = capsys.readouterr().out
    assert "Size of the kernel: 5" in out


def test_cli_explicit_parameters_and_workers(monkeypatch, tmp_path):
    frames = _scene()
    _patch_reader(monkeypatch, frames)
    main(["-i", "dummy.mp4", "-o", str(tmp_path), "-s", "3", "-n", "4", "--workers", "2"])
    written = imageio.imread(tmp_path / "output_3_4.png")
    assert np.array_equal(written, frames[-1])


@pytest.mark.parametrize(
    "argv",
    [
        ["-o", "out"],
        ["-i", "in.mp4"],
        ["-i", "in.mp4", "-o", "out"],
        ["-i", "in.mp4", "-o", "out", "-s", "3"],
        ["-i", "in.mp4", "-o", "out", "-s", "0", "-n", "3"],
        ["-i", "in.mp4", "-o", "out", "-s", "3", "-n", "-1"],
        ["-i", "in.mp4", "-o", "out", "-d", "--granularity", "0"],
        ["-i", "in.mp4", "-o", "out", "-d", "--workers", "0"],
        ["-i", "in.mp4", "-o", "out", "-d", "--threshold", "-1"],
        ["-i", "in.mp4", "-o", "out", "-d", "--max-frames", "0"],
    ],
)
def test_cli_rejects_missing_or_invalid_arguments(argv):
    with pytest.raises(SystemExit):
        main(argv)
