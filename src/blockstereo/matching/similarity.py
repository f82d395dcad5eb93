"""
Patch dissimilarity between two RGBA images.

Cost for a pixel pair (x_left, y_left) <-> (x_right, y_right):
  - take a (2R+1) x (2R+1) window around each pixel
  - clip it so every offset (dx, dy) stays inside BOTH images
    (intersection of the two valid windows, no padding, no border replication)
  - per offset, Euclidean distance in RGB (alpha ignored)
  - return the mean over the offsets actually compared

The mean (not the sum) keeps clipped edge windows comparable with full ones.
The centre offset (0, 0) is always valid, so at least one pixel is compared.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from ..core.errors import PreconditionViolation
from ..core.types import PixelBuffer, FloatArray

# inclusive offset range along one axis: (start, end), start <= 0 <= end
OffsetRange = Tuple[int, int]


def axis_offsets(extent: int, a: int, b: int, radius: int) -> OffsetRange:
    """
    Clip [-radius, +radius] along one axis so a+d and b+d are both in [0, extent).

    start = -R + max(0, R - min(a, b))
    end   =  R - max(0, R - min(extent-1-a, extent-1-b))
    """
    start = -radius + max(0, radius - min(a, b))
    end = radius - max(0, radius - min(extent - 1 - a, extent - 1 - b))
    return start, end


def window_offsets(
        width: int,
        height: int,
        x_left: int,
        y_left: int,
        x_right: int,
        y_right: int,
        *,
        radius: int,
) -> tuple[OffsetRange, OffsetRange]:
    """
    Window for one pixel pair, as ((dx_start, dx_end), (dy_start, dy_end)).
    """
    return (
        axis_offsets(width, x_left, x_right, radius),
        axis_offsets(height, y_left, y_right, radius),
    )


def rgb_distance(left_rgb: FloatArray, right_rgb: FloatArray) -> FloatArray:
    """
    Per-pixel Euclidean distance of two equally shaped (..., 3) float arrays.
    """
    diff = left_rgb - right_rgb
    return np.sqrt(np.sum(diff * diff, axis=-1))


def patch_dissimilarity(
        left: PixelBuffer,
        right: PixelBuffer,
        x_left: int,
        y_left: int,
        x_right: int,
        y_right: int,
        *,
        radius: int = 5,
) -> float:
    """
    Mean per-pixel RGB distance over the clipped window. Lower = more similar.

    Symmetric: patch_dissimilarity(A, a, B, b) == patch_dissimilarity(B, b, A, a).

    Both coordinates must lie inside their image; the estimator only ever
    passes in-range coordinates, so anything else is a caller bug.
    """
    if left.shape != right.shape:
        raise PreconditionViolation(
            f"left and right must have same shape, got {left.shape} vs {right.shape}"
        )
    if not left.in_bounds(x_left, y_left):
        raise PreconditionViolation(f"Left pixel ({x_left}, {y_left}) out of bounds")
    if not right.in_bounds(x_right, y_right):
        raise PreconditionViolation(f"Right pixel ({x_right}, {y_right}) out of bounds")

    (dx0, dx1), (dy0, dy1) = window_offsets(
        left.width, left.height, x_left, y_left, x_right, y_right, radius=radius,
    )

    L = left.data[y_left + dy0: y_left + dy1 + 1, x_left + dx0: x_left + dx1 + 1, :3]
    R = right.data[y_right + dy0: y_right + dy1 + 1, x_right + dx0: x_right + dx1 + 1, :3]

    dist = rgb_distance(L.astype(np.float64), R.astype(np.float64))

    # one running sum, dx outer / dy inner; match_rows_vectorized relies on this order
    total = 0.0
    for value in dist.T.ravel():
        total += float(value)

    num_pixels_compared = dist.size
    return total / num_pixels_compared
