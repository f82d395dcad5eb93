"""
Disparity estimation by brute-force block matching.

For every left pixel (x, y):
  - candidates are x_right in [x - S, x - 1] ∩ [0, W)
    (strictly left of x: closer objects shift left in the right image)
  - score each with patch_dissimilarity at (x, y) vs (x_right, y)
  - keep the minimum; ties go to the smallest x_right
  - store |best_x_right - x|

Pixels are independent, so rows are split into disjoint bands that may run on
a process pool. Each band writes its own row range of the output.

Known boundary anomaly:
  With no candidate (x = 0), best_x_right stays -1 and the stored disparity
  is |-1 - x| = x + 1. It is kept as is; for S >= 1 it only hits column 0,
  where it gives 1 <= S.
"""

from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor
from typing import Optional

import numpy as np
from tqdm import tqdm

from ..core.config import BlockMatchConfig, MatchMethod, validate_search_distance
from ..core.errors import InvalidConfiguration
from ..core.types import PixelBuffer, DisparityMap, IntArray, check_stereo_pair
from .cost_volume import band_rows, match_rows_vectorized
from .similarity import patch_dissimilarity

_DEBUG = os.environ.get("BLOCKSTEREO_DEBUG", "0") == "1"

# Bands per worker. More bands -> smoother progress bar, more scheduling overhead.
_BANDS_PER_WORKER = 4


def best_match_in_row(
        left: PixelBuffer,
        right: PixelBuffer,
        x: int,
        y: int,
        *,
        search_distance: int,
        radius: int,
) -> int:
    """
    Return best_x_right for left pixel (x, y), or -1 if no candidate is in range.
    """
    started = False
    min_difference = 0.0
    best_x_right = -1

    for x_right in range(x - search_distance, x):
        if not (0 <= x_right < left.width):
            continue
        diff = patch_dissimilarity(left, right, x, y, x_right, y, radius=radius)
        if not started or diff < min_difference:
            min_difference = diff
            best_x_right = x_right
            started = True

    return best_x_right


def match_rows_reference(
        left: PixelBuffer,
        right: PixelBuffer,
        y0: int,
        y1: int,
        *,
        search_distance: int,
        radius: int,
) -> IntArray:
    """
    Per-pixel loop over rows [y0, y1). Slow; the semantics every other backend must match.
    """
    out = np.zeros((y1 - y0, left.width), dtype=np.int32)
    for y in range(y0, y1):
        for x in range(left.width):
            best_x_right = best_match_in_row(
                left, right, x, y, search_distance=search_distance, radius=radius,
            )
            out[y - y0, x] = abs(best_x_right - x)
    return out


def _match_band(
        method: MatchMethod,
        left: PixelBuffer,
        right: PixelBuffer,
        y0: int,
        y1: int,
        search_distance: int,
        radius: int,
) -> tuple[int, IntArray]:
    """
    Compute one band. Top-level so it pickles for the process pool.
    """
    if method == "reference":
        rows = match_rows_reference(
            left, right, y0, y1, search_distance=search_distance, radius=radius,
        )
    elif method == "vectorized":
        # only the rows the band's windows touch
        lo, hi = band_rows(left.height, y0, y1, radius)
        rows = match_rows_vectorized(
            left.data[lo:hi, :, :3].astype(np.float64),
            right.data[lo:hi, :, :3].astype(np.float64),
            y0, y1,
            search_distance=search_distance,
            radius=radius,
            row_offset=lo,
            image_height=left.height,
        )
    else:
        raise InvalidConfiguration(f"Unknown method: {method}")
    return y0, rows


def split_row_bands(height: int, num_bands: int) -> list[tuple[int, int]]:
    """
    Split [0, height) into at most num_bands contiguous, disjoint, non-empty [y0, y1) ranges.
    """
    num_bands = max(1, min(int(num_bands), int(height)))
    edges = np.linspace(0, height, num_bands + 1).round().astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


def estimate_disparity(
        left: PixelBuffer,
        right: PixelBuffer,
        cfg: Optional[BlockMatchConfig] = None,
        *,
        search_distance: Optional[int] = None,
) -> DisparityMap:
    """
    Estimate a disparity map for the left image.

    Inputs:
    - left, right: RGBA buffers of identical shape
    - cfg: matching parameters (defaults to BlockMatchConfig())
    - search_distance: explicit S; if None, taken from cfg for the image width

    Raises (before any matching):
    - ShapeMismatch: buffers differ in shape or are not RGBA
    - InvalidConfiguration: S < 1
    """
    cfg = cfg or BlockMatchConfig()

    # ---------- Input validation ----------
    check_stereo_pair(left, right)
    if search_distance is None:
        search_distance = cfg.resolve_search_distance(left.width)
    else:
        validate_search_distance(search_distance)
        search_distance = int(search_distance)

    H, W = left.height, left.width
    R = int(cfg.window_radius)
    disparities = np.zeros((H, W), dtype=np.int32)

    # ---------- In-process ----------
    if cfg.workers == 1:
        if cfg.method == "vectorized":
            offsets = tqdm(
                range(search_distance, 0, -1),
                desc="Matching offsets",
                disable=not cfg.show_progress,
            )
            disparities[:, :] = match_rows_vectorized(
                left.rgb(), right.rgb(), 0, H,
                search_distance=search_distance, radius=R, offsets=offsets,
            )
        else:
            for y in tqdm(range(H), desc="Matching rows", disable=not cfg.show_progress):
                _, rows = _match_band(cfg.method, left, right, y, y + 1, search_distance, R)
                disparities[y] = rows[0]

    # ---------- Worker pool ----------
    else:
        bands = split_row_bands(H, cfg.workers * _BANDS_PER_WORKER)
        with ProcessPoolExecutor(max_workers=cfg.workers) as pool:
            futures = [
                pool.submit(_match_band, cfg.method, left, right, y0, y1, search_distance, R)
                for (y0, y1) in bands
            ]
            for fut in tqdm(futures, desc="Matching bands", disable=not cfg.show_progress):
                y0, rows = fut.result()
                # bands are disjoint, no locking needed
                disparities[y0: y0 + rows.shape[0]] = rows

    if _DEBUG:
        quarter = max(1, W // 4)
        print(f"[debug] S={search_distance} R={R} method={cfg.method} workers={cfg.workers}")
        print(f"[debug] row 0, cols [0, {quarter}): {disparities[0, :quarter].tolist()}")
        print(f"[debug] row 0, cols [{quarter}, {2 * quarter}): {disparities[0, quarter: 2 * quarter].tolist()}")

    return DisparityMap(disparities)
