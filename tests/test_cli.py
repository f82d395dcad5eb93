import numpy as np

from blockstereo.cli import main
from blockstereo.core.config import BlockMatchConfig
from blockstereo.io.png import read_rgba, write_rgba
from blockstereo.pipeline import compute_depthmap

from conftest import rgba, shifted_pair


def test_compute_depthmap_pipeline():
    left, right = shifted_pair(8, 16, 2, seed=1)
    result = compute_depthmap(left, right, BlockMatchConfig(window_radius=2))

    # 0.15625 * 16 = 2.5 -> 3
    assert result.search_distance == 3
    assert np.all(result.disparity.values[:, 2:] == 2)
    assert np.all(result.image.data[:, 2:, 0] == 170)  # round(2/3*255)
    assert np.all(result.image.data[:, :, 3] == 255)


def test_cli_end_to_end(tmp_path, capsys):
    left, right = shifted_pair(8, 16, 2, seed=2)
    lp = write_rgba(tmp_path / "left.png", left)
    rp = write_rgba(tmp_path / "right.png", right)
    out = tmp_path / "depth.png"

    code = main([str(lp), str(rp), str(out), "--window-radius", "2", "--search-distance", "4"])

    assert code == 0
    assert "[saved]" in capsys.readouterr().out
    depth = read_rgba(out)
    assert depth.shape == (8, 16, 4)
    assert np.all(depth.data[:, :, 3] == 255)
    assert np.array_equal(depth.data[:, :, 0], depth.data[:, :, 1])
    assert np.all(depth.data[:, 2:, 0] == 128)  # round(2/4*255) = 127.5 -> 128


def test_cli_rejects_mismatched_pair(tmp_path, capsys):
    lp = write_rgba(tmp_path / "left.png", rgba(np.zeros((4, 8, 3), dtype=np.uint8)))
    rp = write_rgba(tmp_path / "right.png", rgba(np.zeros((4, 9, 3), dtype=np.uint8)))
    out = tmp_path / "depth.png"

    code = main([str(lp), str(rp), str(out), "--search-distance", "2"])

    assert code == 1
    assert "[error]" in capsys.readouterr().err
    assert not out.exists()


def test_cli_rejects_zero_search_distance(tmp_path):
    img = rgba(np.zeros((4, 8, 3), dtype=np.uint8))
    lp = write_rgba(tmp_path / "left.png", img)
    rp = write_rgba(tmp_path / "right.png", img)

    assert main([str(lp), str(rp), str(tmp_path / "d.png"), "--search-distance", "0"]) == 1


def test_cli_missing_input(tmp_path):
    assert main([str(tmp_path / "a.png"), str(tmp_path / "b.png"), str(tmp_path / "c.png")]) == 1
