"""
blockstereo

Brute-force block matching for rectified stereo pairs:
- RGBA pixel buffers and disparity maps
- Clipped-window RGB patch dissimilarity
- Disparity estimation (reference loop or vectorized, optional process pool)
- Grayscale depth visualization and PNG I/O
"""

from .core import (
    PixelBuffer, DisparityMap, check_stereo_pair,
    BlockMatchConfig, round_half_up,
    StereoError, PreconditionViolation, ShapeMismatch, InvalidConfiguration,
    InvariantViolation, ImageDecodeError, ImageEncodeError,
)
from .matching import patch_dissimilarity, estimate_disparity
from .viz import visualize_disparity
from .io import read_rgba, write_rgba
from .pipeline import compute_depthmap, DepthmapResult

__version__ = "0.1.0"

__all__ = [
    "PixelBuffer", "DisparityMap", "check_stereo_pair",
    "BlockMatchConfig", "round_half_up",
    "StereoError", "PreconditionViolation", "ShapeMismatch", "InvalidConfiguration",
    "InvariantViolation", "ImageDecodeError", "ImageEncodeError",
    "patch_dissimilarity", "estimate_disparity",
    "visualize_disparity",
    "read_rgba", "write_rgba",
    "compute_depthmap", "DepthmapResult",
]
