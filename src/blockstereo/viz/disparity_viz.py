"""
Visualization utilities for disparity maps.
  - turning a DisparityMap into a grayscale+alpha image
  - optionally showing or saving it
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from ..core.config import validate_search_distance
from ..core.errors import InvariantViolation
from ..core.types import DisparityMap, PixelBuffer
from ..io.png import to_bgra, write_rgba


def visualize_disparity(disparity: DisparityMap, search_distance: int) -> PixelBuffer:
    """
    Map disparities onto a grayscale RGBA image.

    Each pixel:
        R = G = B = round(d / S * 255)
        A = 255

    d <= S is guaranteed by the estimator, so a scaled value outside [0, 255]
    means an estimator bug: raise InvariantViolation, never clamp.

    Raises InvalidConfiguration for S < 1 (the scaling is undefined).
    """
    validate_search_distance(search_distance)

    scaled = disparity.values.astype(np.float64) / float(search_distance) * 255.0

    bad = (scaled < 0.0) | (scaled > 255.0)
    if np.any(bad):
        ys, xs = np.nonzero(bad)
        y, x = int(ys[0]), int(xs[0])
        raise InvariantViolation(
            f"Scaled disparity {scaled[y, x]:.2f} out of [0, 255] at ({x}, {y}): "
            f"disparity {int(disparity.values[y, x])} > search_distance {search_distance} "
            f"({int(np.count_nonzero(bad))} pixel(s) affected)"
        )

    # round half up, matching C round() for non-negative values
    gray = np.floor(scaled + 0.5).astype(np.uint8)

    out = np.empty((disparity.height, disparity.width, 4), dtype=np.uint8)
    out[:, :, 0] = gray  # red
    out[:, :, 1] = gray  # green
    out[:, :, 2] = gray  # blue
    out[:, :, 3] = 255   # alpha
    return PixelBuffer(out)


# Display helper
def resize_for_display(img: np.ndarray, scale: float) -> np.ndarray:
    """
    Resize only for display so big images don't overflow the screen.
    """
    if img is None or img.size == 0:
        return img
    if scale == 1.0:
        return img

    h, w = img.shape[:2]
    new_h = max(1, int(h * scale))
    new_w = max(1, int(w * scale))
    return cv2.resize(img, (new_w, new_h), interpolation=cv2.INTER_AREA)


def show_and_save_disparity(
        disparity: DisparityMap,
        search_distance: int,
        *,
        output_path: Optional[Path] = None,
        title: str = "Disparity",
        display_scale: float = 1.0,
        show: bool = True,
) -> PixelBuffer:
    """
    Visualize a disparity map, optionally display it and save it as PNG.

    Parameters:
    - disparity, search_distance: estimator output and the S it used.
    - output_path: If provided, save the image to this path.
    - title: Window title if show=True.
    - display_scale: Resize factor for display only.
    - show: If True, display and wait for a keypress.

    Returns:
    - The visualized RGBA buffer.
    """
    image = visualize_disparity(disparity, search_distance)

    if show:
        cv2.imshow(title, resize_for_display(to_bgra(image), display_scale))
        cv2.waitKey(0)
        cv2.destroyWindow(title)

    if output_path is not None:
        write_rgba(output_path, image)
        print(f"[saved] {output_path}")

    return image
