"""
PNG decode/encode at the edge of the pipeline.

The matcher only sees RGBA PixelBuffers. OpenCV hands back BGR(A) or gray,
so everything is normalized to RGBA here (alpha = 255 when the file has none).
"""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

from ..core.errors import ImageDecodeError, ImageEncodeError
from ..core.types import PixelBuffer, RGBA_CHANNELS


def _to_rgba(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    channels = img.shape[2]
    if channels == 1:
        return cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2RGBA)
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    if channels == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    raise ImageDecodeError(f"Unsupported channel count: {channels}")


def to_bgra(image: PixelBuffer) -> np.ndarray:
    """
    RGBA buffer -> BGRA array for OpenCV display / encoding.
    """
    return cv2.cvtColor(np.ascontiguousarray(image.data), cv2.COLOR_RGBA2BGRA)


def read_rgba(path: str | Path) -> PixelBuffer:
    """
    Decode an image file into an RGBA PixelBuffer.

    16-bit PNGs are reduced to 8 bits (high byte).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")

    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None or img.size == 0:
        raise ImageDecodeError(f"Could not decode image: {path}")

    if img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)
    elif img.dtype != np.uint8:
        raise ImageDecodeError(f"Unsupported pixel type {img.dtype} in {path}")

    return PixelBuffer(_to_rgba(img))


def write_rgba(path: str | Path, image: PixelBuffer) -> Path:
    """
    Encode an RGBA PixelBuffer to disk. Parent directories are created.
    """
    path = Path(path)
    if image.channels != RGBA_CHANNELS:
        raise ImageEncodeError(f"Expected RGBA buffer, got {image.channels} channels")

    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path), to_bgra(image)):
        raise ImageEncodeError(f"Could not write image: {path}")
    return path
