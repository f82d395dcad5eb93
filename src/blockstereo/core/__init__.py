"""
Core data types, configuration and errors.
"""

from .types import (
    ByteArray, IntArray, FloatArray, ImageRGBA, Disparity2D, RGBA_CHANNELS,
    PixelBuffer, DisparityMap, check_stereo_pair,
)

from .config import (
    BlockMatchConfig, MatchMethod, round_half_up, validate_search_distance,
    DEFAULT_WINDOW_RADIUS, DEFAULT_SEARCH_PROPORTION,
)

from .errors import (
    StereoError, PreconditionViolation, ShapeMismatch, InvalidConfiguration,
    InvariantViolation, ImageDecodeError, ImageEncodeError,
)

__all__ = [
    "ByteArray", "IntArray", "FloatArray", "ImageRGBA", "Disparity2D", "RGBA_CHANNELS",
    "PixelBuffer", "DisparityMap", "check_stereo_pair",
    "BlockMatchConfig", "MatchMethod", "round_half_up", "validate_search_distance",
    "DEFAULT_WINDOW_RADIUS", "DEFAULT_SEARCH_PROPORTION",
    "StereoError", "PreconditionViolation", "ShapeMismatch", "InvalidConfiguration",
    "InvariantViolation", "ImageDecodeError", "ImageEncodeError",
]
