"""
Command line entry point.

    depthmap LEFT_IMAGE_PNG RIGHT_IMAGE_PNG OUTPUT_PNG [options]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .core.config import BlockMatchConfig, DEFAULT_SEARCH_PROPORTION, DEFAULT_WINDOW_RADIUS
from .core.errors import PreconditionViolation, ImageDecodeError, ImageEncodeError
from .io.png import read_rgba
from .pipeline import compute_depthmap
from .viz.disparity_viz import show_and_save_disparity


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depthmap",
        description="Estimate a disparity map from a rectified stereo pair and save it as a grayscale PNG.",
    )
    parser.add_argument("left", type=Path, help="Left image (PNG)")
    parser.add_argument("right", type=Path, help="Right image (PNG)")
    parser.add_argument("output", type=Path, help="Output depth image (PNG)")
    parser.add_argument("--window-radius", type=int, default=DEFAULT_WINDOW_RADIUS,
                        help="Matching window radius, side = 2R+1 (default: %(default)s)")
    parser.add_argument("--search-proportion", type=float, default=DEFAULT_SEARCH_PROPORTION,
                        help="Maximum disparity as a fraction of image width (default: %(default)s)")
    parser.add_argument("--search-distance", type=int, default=None,
                        help="Maximum disparity in pixels, overrides --search-proportion")
    parser.add_argument("--method", choices=("vectorized", "reference"), default="vectorized",
                        help="Matching backend (default: %(default)s)")
    parser.add_argument("--workers", type=int, default=1,
                        help="Processes used for matching (default: %(default)s)")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    parser.add_argument("--show", action="store_true", help="Display the result and wait for a key")
    parser.add_argument("--display-scale", type=float, default=1.0,
                        help="Resize factor for --show only (default: %(default)s)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = BlockMatchConfig(
            window_radius=args.window_radius,
            search_proportion=args.search_proportion,
            search_distance=args.search_distance,
            method=args.method,
            workers=args.workers,
            show_progress=args.progress,
        )

        left = read_rgba(args.left)
        right = read_rgba(args.right)
        print(f"[info] left {left.width}x{left.height}, right {right.width}x{right.height}, channels={left.channels}")

        result = compute_depthmap(left, right, cfg)
        print(f"[info] window_radius={cfg.window_radius} search_distance={result.search_distance}")

        show_and_save_disparity(
            result.disparity,
            result.search_distance,
            output_path=args.output,
            title="Depth map",
            display_scale=args.display_scale,
            show=args.show,
        )
    except (PreconditionViolation, ImageDecodeError, ImageEncodeError, FileNotFoundError) as e:
        # InvariantViolation is a bug and propagates with its traceback
        print(f"[error] {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
