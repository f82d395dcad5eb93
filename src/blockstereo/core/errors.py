"""
Error taxonomy for the block-matching pipeline.

- PreconditionViolation: bad inputs or configuration, raised before any work.
- InvariantViolation: an internal result broke an invariant (algorithm bug).
- ImageDecodeError / ImageEncodeError: PNG read/write failures at the I/O edge.

Nothing here is retried: the computation is deterministic, a retry would fail the same way.
"""

from __future__ import annotations


class StereoError(Exception):
    """Base class for every error raised by blockstereo."""


class PreconditionViolation(StereoError, ValueError):
    """Inputs or configuration rejected before computation starts."""


class ShapeMismatch(PreconditionViolation):
    """Left/right buffers differ in width, height or channel count."""


class InvalidConfiguration(PreconditionViolation):
    """Matching parameters that cannot produce a valid disparity map."""


class InvariantViolation(StereoError, RuntimeError):
    """A computed value fell outside the range the pipeline guarantees."""


class ImageDecodeError(StereoError, OSError):
    pass


class ImageEncodeError(StereoError, OSError):
    pass
