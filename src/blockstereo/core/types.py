"""
Shared typed primitives for the block-matching pipeline.

Defines:
- Typed NumPy aliases
    - Images are (H,W,C) uint8 arrays, C == 4 (R,G,B,A)
    - Disparities are (H,W) int32 arrays
- PixelBuffer: read-only RGBA image with bounds-checked pixel access
- DisparityMap: read-only per-pixel horizontal offsets
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union, TypeAlias

import numpy as np
import numpy.typing as npt

from .errors import PreconditionViolation, ShapeMismatch

# ---------- Numpy typing aliases ----------
# - uint8 for decoded pixels (what PNG decoders hand back)
# - int32 for disparities
# - float64 for matching costs

ByteArray: TypeAlias = npt.NDArray[np.uint8]
IntArray: TypeAlias = npt.NDArray[np.int32]
FloatArray: TypeAlias = npt.NDArray[np.float64]

# RGBA image, row-major.
ImageRGBA: TypeAlias = ByteArray      # shape: (H, W, 4)

# Per-pixel disparity.
Disparity2D: TypeAlias = IntArray     # shape: (H, W)

RGBA_CHANNELS = 4


# ---------- Pixel buffer ----------
# frozen=True: the decoder creates it once, the core only reads it
@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Immutable view over a decoded image.

    data:
      (height, width, channels) uint8 array. The constructor takes a read-only
      copy, so callers cannot mutate the buffer afterwards.

    Pixel (x, y) is data[y, x, :], which in the flattened row-major storage is
    the slice [(y*width + x)*channels, +channels).
    """
    data: ImageRGBA

    def __post_init__(self) -> None:
        arr = np.asarray(self.data)
        if arr.ndim != 3:
            raise PreconditionViolation(f"Expected image shape (H, W, C) but got {arr.shape}")
        if arr.dtype != np.uint8:
            raise PreconditionViolation(f"Expected uint8 pixels but got {arr.dtype}")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise PreconditionViolation(f"Image must be non-empty, got {arr.shape}")

        frozen = np.array(arr, dtype=np.uint8, copy=True, order="C")
        frozen.setflags(write=False)
        object.__setattr__(self, "data", frozen)

    @classmethod
    def from_bytes(
            cls,
            data: Union[bytes, bytearray, Sequence[int]],
            *,
            width: int,
            height: int,
            channels: int = RGBA_CHANNELS,
    ) -> "PixelBuffer":
        """
        Build from flat row-major bytes, as a PNG decoder returns them.
        len(data) must equal width*height*channels.
        """
        flat = np.frombuffer(bytes(data), dtype=np.uint8)
        expected = int(width) * int(height) * int(channels)
        if flat.size != expected:
            raise PreconditionViolation(
                f"Buffer length {flat.size} != width*height*channels = "
                f"{width}*{height}*{channels} = {expected}"
            )
        return cls(flat.reshape(int(height), int(width), int(channels)))

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def channels(self) -> int:
        return int(self.data.shape[2])

    @property
    def shape(self) -> tuple[int, int, int]:
        return self.height, self.width, self.channels

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def pixel(self, x: int, y: int) -> ByteArray:
        """
        Return the channel values of pixel (x, y).
        Raises PreconditionViolation outside [0,width) x [0,height).
        """
        if not self.in_bounds(x, y):
            raise PreconditionViolation(
                f"Pixel ({x}, {y}) outside image of size {self.width}x{self.height}"
            )
        return self.data[y, x]

    def rgb(self) -> FloatArray:
        """
        Colour planes as float64 (alpha dropped), ready for distance math.
        """
        return self.data[:, :, :3].astype(np.float64)

    def tobytes(self) -> bytes:
        return self.data.tobytes()


# ---------- Disparity map ----------
@dataclass(frozen=True, eq=False)
class DisparityMap:
    """
    Chosen horizontal offset per left-image pixel.

    values[y, x] = |best_x_right - x|, in [0, search_distance] under normal conditions.
    """
    values: Disparity2D

    def __post_init__(self) -> None:
        arr = np.asarray(self.values)
        if arr.ndim != 2:
            raise PreconditionViolation(f"Expected disparity shape (H, W) but got {arr.shape}")

        frozen = np.array(arr, dtype=np.int32, copy=True, order="C")
        frozen.setflags(write=False)
        object.__setattr__(self, "values", frozen)

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    def at(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PreconditionViolation(
                f"Disparity ({x}, {y}) outside map of size {self.width}x{self.height}"
            )
        return int(self.values[y, x])


# ---------- Helper Function ----------
def check_stereo_pair(left: PixelBuffer, right: PixelBuffer) -> None:
    """
    Verify the two buffers can be matched against each other.
    Same width/height/channels, and RGBA.
    """
    if left.shape != right.shape:
        raise ShapeMismatch(
            f"left and right must have same shape, got {left.shape} vs {right.shape}"
        )
    if left.channels != RGBA_CHANNELS:
        raise ShapeMismatch(f"Expected {RGBA_CHANNELS} channels (RGBA) but got {left.channels}")
