"""Estimate a background color by sampling the diagonals of the four corners."""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import List, Tuple

from PIL import Image

from design_thumbnail.errors import InsufficientSampleError

Color = Tuple[int, int, int, int]

CROP_SIZE = 30


class CornerAnchor(Enum):
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


# Sampling order; also the tie-break order.
ANCHORS = (
    CornerAnchor.TOP_LEFT,
    CornerAnchor.TOP_RIGHT,
    CornerAnchor.BOTTOM_LEFT,
    CornerAnchor.BOTTOM_RIGHT,
)


def anchor_box(width: int, height: int, crop_size: int, anchor: CornerAnchor) -> Tuple[int, int, int, int]:
    """Return the (left, top, right, bottom) box of a corner region, clipped to the image."""

    w = min(crop_size, width)
    h = min(crop_size, height)
    if anchor is CornerAnchor.TOP_LEFT:
        return 0, 0, w, h
    if anchor is CornerAnchor.TOP_RIGHT:
        return width - w, 0, width, h
    if anchor is CornerAnchor.BOTTOM_LEFT:
        return 0, height - h, w, height
    return width - w, height - h, width, height


def crop_anchor(image: Image.Image, crop_size: int, anchor: CornerAnchor) -> Image.Image:
    """Crop a ``crop_size`` square anchored at a corner. Smaller images yield a smaller region."""

    return image.crop(anchor_box(image.width, image.height, crop_size, anchor))


def sample_corner_colors(image: Image.Image, crop_size: int = CROP_SIZE) -> List[Color]:
    """Collect the diagonal pixels of each corner region, in anchor order.

    Only positions (0, 0), (1, 1), ... of each region are read, so at most
    ``4 * crop_size`` pixels are sampled regardless of image size.

    Raises:
        InsufficientSampleError: if the image has no pixels or ``crop_size`` is not positive.
    """

    if crop_size <= 0:
        raise InsufficientSampleError(f"crop_size must be positive, got {crop_size}")
    if image.width <= 0 or image.height <= 0:
        raise InsufficientSampleError(f"Cannot sample an empty image ({image.width}x{image.height})")

    rgba = image if image.mode == "RGBA" else image.convert("RGBA")

    samples: List[Color] = []
    for anchor in ANCHORS:
        region = crop_anchor(rgba, crop_size, anchor)
        for pos in range(min(region.size)):
            samples.append(tuple(region.getpixel((pos, pos))))

    if not samples:
        raise InsufficientSampleError("No pixels sampled from image corners")
    return samples


def estimate_background_color(image: Image.Image, crop_size: int = CROP_SIZE) -> Color:
    """Return the most frequent corner color as an ``(r, g, b, a)`` tuple.

    Counts are taken over the diagonal samples of all four corners combined.
    On a tie the color seen first wins (top-left, top-right, bottom-left,
    bottom-right; increasing diagonal index within a corner).
    """

    counts = Counter(sample_corner_colors(image, crop_size))
    # Counter keeps insertion order and max() returns the first maximum.
    return max(counts, key=counts.__getitem__)


__all__ = [
    "Color",
    "CornerAnchor",
    "ANCHORS",
    "CROP_SIZE",
    "anchor_box",
    "crop_anchor",
    "sample_corner_colors",
    "estimate_background_color",
]
