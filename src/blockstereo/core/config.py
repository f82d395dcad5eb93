"""
Block-matching configuration.

One immutable object carries every knob of a run, so tests and the CLI can
vary them without touching module globals.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Optional

import numpy as np

from .errors import InvalidConfiguration

MatchMethod = Literal["vectorized", "reference"]

DEFAULT_WINDOW_RADIUS = 5
DEFAULT_SEARCH_PROPORTION = 0.15625


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for non-negative input.
    Python's round() is banker's rounding, which is not what the pipeline wants.
    """
    return int(math.floor(float(value) + 0.5))


def _is_int(value: object) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


@dataclass(frozen=True)
class BlockMatchConfig:
    """
    Parameters for brute-force block matching.

    Parameters:
    - window_radius : int
        Half side of the square matching window (side = 2R+1).
        Larger radius -> smoother map, blurrier edges, slower.

    - search_proportion : float
        Maximum disparity as a fraction of image width.
        0.15625 on a 640 px wide pair searches 100 px.

    - search_distance : Optional[int]
        Explicit maximum disparity in pixels. Overrides search_proportion.

    - method:
        "vectorized": per-offset cost images with shifted-slice window sums (fast).
        "reference":  per-pixel loop over patch_dissimilarity (slow, direct).

    - workers:
        Number of processes used to compute row bands. 1 = in-process.

    - show_progress:
        Show a tqdm progress bar while matching.
    """
    window_radius: int = DEFAULT_WINDOW_RADIUS
    search_proportion: float = DEFAULT_SEARCH_PROPORTION
    search_distance: Optional[int] = None
    method: MatchMethod = "vectorized"
    workers: int = 1
    show_progress: bool = False

    def __post_init__(self) -> None:
        if not _is_int(self.window_radius) or self.window_radius < 0:
            raise InvalidConfiguration(f"window_radius must be an integer >= 0, got {self.window_radius}")
        if not (
                isinstance(self.search_proportion, (int, float, np.integer, np.floating))
                and not isinstance(self.search_proportion, bool)
                and math.isfinite(self.search_proportion)
                and self.search_proportion > 0.0
        ):
            raise InvalidConfiguration(f"search_proportion must be > 0, got {self.search_proportion}")
        if self.search_distance is not None:
            validate_search_distance(self.search_distance)
        if self.method not in ("vectorized", "reference"):
            raise InvalidConfiguration(f"Unknown method: {self.method}")
        if not _is_int(self.workers) or self.workers < 1:
            raise InvalidConfiguration(f"workers must be >= 1, got {self.workers}")

    def resolve_search_distance(self, width: int) -> int:
        """
        Maximum disparity for an image of the given width.

        S = search_distance if set, else round(search_proportion * width).
        S < 1 cannot be scaled for display, so it is rejected here,
        before any matching runs.
        """
        if self.search_distance is not None:
            s = self.search_distance
        else:
            s = round_half_up(self.search_proportion * int(width))

        validate_search_distance(s)
        return int(s)


def validate_search_distance(search_distance: int) -> None:
    if not _is_int(search_distance):
        raise InvalidConfiguration(
            f"search_distance must be an integer, got {search_distance!r}"
        )
    if search_distance < 1:
        raise InvalidConfiguration(
            f"search_distance must be >= 1, got {search_distance} "
            "(image too narrow for the search proportion?)"
        )
