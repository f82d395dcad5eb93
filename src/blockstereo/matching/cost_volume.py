"""
Vectorized block matching over a band of rows.

Same result as looping patch_dissimilarity over every (x, x_right) pair, but
one candidate offset d = x - x_right at a time for the whole band:

  1) D_d(y, x') = ||L(y, x') - R(y, x'-d)||   for x' in [d, W), else 0
  2) window sums of D_d, accumulated one shifted slice at a time in the same
     order as the per-pixel loop (dx outer, dy inner); adding the 0.0 of an
     invalid cell leaves a double unchanged, so each sum is bit-identical
  3) divide by the exact number of valid pixel pairs in each clipped window
  4) keep the strict minimum, visiting d = S..1 so x_right ascends
     -> earliest candidate wins ties, like the per-pixel loop

Valid columns are x' in [d, W): x_right = x - d < x, so the right image
bounds the window on the left and the left image bounds it on the right.
"""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from ..core.types import FloatArray, IntArray
from .similarity import rgb_distance


def _window_counts(extent: int, centers: np.ndarray, radius: int, lo: int = 0) -> np.ndarray:
    """
    Number of positions in [c - R, c + R] ∩ [lo, extent) for each centre c.
    """
    return np.minimum(centers + radius, extent - 1) - np.maximum(centers - radius, lo) + 1


def band_rows(height: int, y0: int, y1: int, radius: int) -> tuple[int, int]:
    """
    Image rows [lo, hi) that the windows of rows [y0, y1) can touch.
    """
    return max(0, y0 - radius), min(height, y1 + radius)


def match_rows_vectorized(
        left_rgb: FloatArray,
        right_rgb: FloatArray,
        y0: int,
        y1: int,
        *,
        search_distance: int,
        radius: int,
        offsets: Optional[Iterable[int]] = None,
        row_offset: int = 0,
        image_height: Optional[int] = None,
) -> IntArray:
    """
    Disparities for rows [y0, y1) of the left image.

    Inputs:
    - left_rgb, right_rgb: (h,W,3) float64 colour planes holding image rows
      [row_offset, row_offset + h). Must cover band_rows(image_height, y0, y1, radius).
    - y0, y1: band of rows to compute, in image coordinates
    - search_distance: S, candidates are x_right in [x-S, x-1] ∩ [0, W)
    - radius: window radius R
    - offsets: iterable over d (defaults to S..1). Lets the caller wrap it in a
      progress bar; must still run in descending order.
    - image_height: full image height (defaults to row_offset + h)

    Returns:
    - (y1-y0, W) int32 disparities. Pixels with no candidate (x = 0) get
      |-1 - x| = x + 1.
    """
    h, W = left_rgb.shape[:2]
    H = int(image_height) if image_height is not None else row_offset + h
    R = int(radius)
    band_h = y1 - y0

    lo, hi = band_rows(H, y0, y1, R)
    if lo < row_offset or hi > row_offset + h:
        raise ValueError(
            f"rows [{row_offset}, {row_offset + h}) do not cover the window rows [{lo}, {hi})"
        )
    L = left_rgb[lo - row_offset: hi - row_offset]
    Rr = right_rgb[lo - row_offset: hi - row_offset]

    # Rows outside the image stay zero in the padded distance image.
    pad_top = lo - (y0 - R)

    ys = np.arange(y0, y1)
    xs = np.arange(W)
    ny = _window_counts(H, ys, R).astype(np.float64)  # (band_h,)

    best_cost = np.full((band_h, W), np.inf, dtype=np.float64)
    best_x_right = np.full((band_h, W), -1, dtype=np.int64)

    if offsets is None:
        offsets = range(search_distance, 0, -1)

    for d in offsets:
        if d >= W:
            # no x has x - d >= 0
            continue

        # Distance image: R zero rows/columns beyond the band on every side.
        dist = np.zeros((band_h + 2 * R, W + 2 * R), dtype=np.float64)
        dist[pad_top: pad_top + (hi - lo), R + d: R + W] = rgb_distance(L[:, d:], Rr[:, : W - d])

        # Window sum, dx outer / dy inner, one running double per pixel.
        box_sums = np.zeros((band_h, W), dtype=np.float64)
        for dx in range(-R, R + 1):
            for dy in range(-R, R + 1):
                box_sums += dist[R + dy: R + dy + band_h, R + dx: R + dx + W]

        valid = xs >= d
        nx = _window_counts(W, xs[valid], R, lo=d).astype(np.float64)

        cost = np.full((band_h, W), np.inf, dtype=np.float64)
        cost[:, valid] = box_sums[:, valid] / (ny[:, None] * nx[None, :])

        # strict "<": an equal cost at a larger x_right never replaces the earlier one
        better = cost < best_cost
        best_cost = np.where(better, cost, best_cost)
        best_x_right = np.where(better, (xs - d)[None, :], best_x_right)

    return np.abs(best_x_right - xs[None, :]).astype(np.int32)
