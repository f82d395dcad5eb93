from .disparity_viz import (
    visualize_disparity, resize_for_display, show_and_save_disparity
)

__all__ = [
    "visualize_disparity", "resize_for_display", "show_and_save_disparity"
]
