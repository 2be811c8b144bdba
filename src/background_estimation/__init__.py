"""Package for inferring a padding color from an image's corners."""

from .estimator import ANCHORS, CROP_SIZE, Color, CornerAnchor, crop_anchor, estimate_background_color, sample_corner_colors

__all__ = [
    "estimate_background_color",
    "sample_corner_colors",
    "crop_anchor",
    "CornerAnchor",
    "ANCHORS",
    "CROP_SIZE",
    "Color",
]
