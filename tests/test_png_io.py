import cv2
import numpy as np
import pytest

from blockstereo.core.errors import ImageDecodeError
from blockstereo.io.png import read_rgba, write_rgba, to_bgra

from conftest import rgba


def test_write_then_read_rgba(tmp_path):
    rng = np.random.default_rng(5)
    data = rng.integers(0, 256, size=(6, 9, 4), dtype=np.uint8)
    src = rgba(data[:, :, :3])

    path = write_rgba(tmp_path / "out" / "img.png", src)
    back = read_rgba(path)

    np.testing.assert_array_equal(back.data, src.data)


def test_bgr_png_becomes_rgba(tmp_path):
    bgr = np.zeros((2, 3, 3), dtype=np.uint8)
    bgr[:, :, 0] = 10   # blue
    bgr[:, :, 2] = 200  # red
    path = tmp_path / "bgr.png"
    assert cv2.imwrite(str(path), bgr)

    img = read_rgba(path)
    assert img.channels == 4
    assert img.pixel(0, 0).tolist() == [200, 0, 10, 255]


def test_gray_png_becomes_rgba(tmp_path):
    path = tmp_path / "gray.png"
    assert cv2.imwrite(str(path), np.full((3, 3), 77, dtype=np.uint8))

    img = read_rgba(path)
    assert img.pixel(1, 1).tolist() == [77, 77, 77, 255]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_rgba(tmp_path / "nope.png")


def test_undecodable_file(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not a png")
    with pytest.raises(ImageDecodeError):
        read_rgba(path)


def test_to_bgra_feeds_opencv_blue_first():
    img = rgba(np.array([[[200, 50, 10]]], dtype=np.uint8))
    assert to_bgra(img)[0, 0].tolist() == [10, 50, 200, 255]
