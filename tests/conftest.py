from __future__ import annotations

import math

import numpy as np
import pytest

from blockstereo.core.types import PixelBuffer


def rgba(rgb: np.ndarray, alpha: int = 255) -> PixelBuffer:
    """(H,W,3) uint8 -> RGBA PixelBuffer with constant alpha."""
    rgb = np.asarray(rgb, dtype=np.uint8)
    a = np.full(rgb.shape[:2] + (1,), alpha, dtype=np.uint8)
    return PixelBuffer(np.concatenate([rgb, a], axis=2))


def shifted_pair(height: int, width: int, shift: int, seed: int = 0) -> tuple[PixelBuffer, PixelBuffer]:
    """
    Random texture pair where left(x) == right(x - shift) for x >= shift.
    """
    rng = np.random.default_rng(seed)
    texture = rng.integers(0, 256, size=(height, width + shift, 3), dtype=np.uint8)
    left = rgba(texture[:, :width])
    right = rgba(texture[:, shift: shift + width])
    return left, right


def loop_dissimilarity(left: PixelBuffer, right: PixelBuffer, xl: int, yl: int, xr: int, yr: int, radius: int) -> float:
    """
    Plain nested loops: dx outer, dy inner, integer squared distance, one running double.
    """
    W, H = left.width, left.height
    x_start = -radius + max(0, radius - min(xl, xr))
    y_start = -radius + max(0, radius - min(yl, yr))
    x_end = radius - max(0, radius - min(W - 1 - xl, W - 1 - xr))
    y_end = radius - max(0, radius - min(H - 1 - yl, H - 1 - yr))

    total = 0.0
    count = 0
    for dx in range(x_start, x_end + 1):
        for dy in range(y_start, y_end + 1):
            a = left.data[yl + dy, xl + dx]
            b = right.data[yr + dy, xr + dx]
            sq = sum((int(a[c]) - int(b[c])) ** 2 for c in range(3))
            total += math.sqrt(sq)
            count += 1
    return total / count


def loop_disparity(left: PixelBuffer, right: PixelBuffer, search_distance: int, radius: int) -> np.ndarray:
    """
    Disparity map from loop_dissimilarity with first-minimum selection.
    """
    out = np.zeros((left.height, left.width), dtype=np.int32)
    for y in range(left.height):
        for x in range(left.width):
            best, best_x = None, -1
            for xr in range(max(0, x - search_distance), x):
                cost = loop_dissimilarity(left, right, x, y, xr, y, radius)
                if best is None or cost < best:
                    best, best_x = cost, xr
            out[y, x] = abs(best_x - x)
    return out


def quantized_pair(height: int, width: int, levels: int, seed: int) -> tuple[PixelBuffer, PixelBuffer]:
    """
    Few-level random images: many candidate windows with mathematically equal costs.
    """
    rng = np.random.default_rng(seed)
    step = 255 // max(1, levels - 1)
    left = rgba(rng.integers(0, levels, size=(height, width, 3)) * step)
    right = rgba(rng.integers(0, levels, size=(height, width, 3)) * step)
    return left, right


def piecewise_flat_pair(height: int, width: int, seed: int) -> tuple[PixelBuffer, PixelBuffer]:
    """
    Vertical stripes of constant colour, right image shifted by a few pixels.
    """
    rng = np.random.default_rng(seed)
    colours = rng.integers(0, 4, size=width + 4) * 60
    widths = rng.integers(2, 6, size=width + 4)
    cols = np.repeat(colours, widths)[: width + 4]
    img = np.broadcast_to(cols[None, :, None], (height, width + 4, 3))
    left = rgba(img[:, :width])
    right = rgba(img[:, 3: 3 + width])
    return left, right


@pytest.fixture
def random_pair() -> tuple[PixelBuffer, PixelBuffer]:
    rng = np.random.default_rng(7)
    left = rgba(rng.integers(0, 256, size=(10, 14, 3), dtype=np.uint8))
    right = rgba(rng.integers(0, 256, size=(10, 14, 3), dtype=np.uint8))
    return left, right


@pytest.fixture
def uniform_pair() -> tuple[PixelBuffer, PixelBuffer]:
    flat = np.full((6, 12, 3), 90, dtype=np.uint8)
    return rgba(flat), rgba(flat)
