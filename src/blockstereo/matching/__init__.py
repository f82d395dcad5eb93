"""
Matching package
"""
from .similarity import axis_offsets, window_offsets, rgb_distance, patch_dissimilarity
from .cost_volume import band_rows, match_rows_vectorized
from .estimator import (
    best_match_in_row, match_rows_reference, split_row_bands, estimate_disparity,
)

__all__ = [
    "axis_offsets", "window_offsets", "rgb_distance", "patch_dissimilarity",
    "band_rows", "match_rows_vectorized",
    "best_match_in_row", "match_rows_reference", "split_row_bands", "estimate_disparity",
]
