"""
End-to-end in-memory pipeline: stereo pair -> disparity -> depth image.

No file I/O here; see blockstereo.io for that.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.config import BlockMatchConfig
from .core.types import PixelBuffer, DisparityMap, check_stereo_pair
from .matching.estimator import estimate_disparity
from .viz.disparity_viz import visualize_disparity


@dataclass(frozen=True, eq=False)
class DepthmapResult:
    disparity: DisparityMap
    image: PixelBuffer         # grayscale+alpha visualization
    search_distance: int       # S used for matching and scaling
    cfg: BlockMatchConfig


def compute_depthmap(
        left: PixelBuffer,
        right: PixelBuffer,
        cfg: Optional[BlockMatchConfig] = None,
) -> DepthmapResult:
    """
    Validate, match, visualize.

    All precondition checks (shapes, S >= 1) happen before matching starts,
    and nothing partial is returned on failure.
    """
    cfg = cfg or BlockMatchConfig()

    check_stereo_pair(left, right)
    search_distance = cfg.resolve_search_distance(left.width)

    disparity = estimate_disparity(left, right, cfg, search_distance=search_distance)
    image = visualize_disparity(disparity, search_distance)

    return DepthmapResult(
        disparity=disparity,
        image=image,
        search_distance=search_distance,
        cfg=cfg,
    )
