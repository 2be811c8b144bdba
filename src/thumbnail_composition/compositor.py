"""Resize, sharpen and pad an image onto a square background canvas."""

from __future__ import annotations

from typing import Sequence, Tuple

from PIL import Image, ImageFilter

from design_thumbnail.errors import CompositeError, ResizeError
from design_thumbnail.profiles import TransformProfile

# Catmull-Rom cubic; softens slightly, hence the fixed sharpening pass.
RESAMPLE = Image.Resampling.BICUBIC
SHARPEN = ImageFilter.UnsharpMask(radius=0.5, percent=100, threshold=0)


def fit_dimensions(width: int, height: int, size: int) -> Tuple[int, int]:
    """Scale (width, height) so the longer side equals ``size``.

    Landscape sources pin the width, everything else pins the height; the
    other side follows the aspect ratio, rounded, never below 1px.
    """

    if width > height:
        return size, max(1, int(height * size / width + 0.5))
    return max(1, int(width * size / height + 0.5)), size


def center_offset(canvas_size: Tuple[int, int], content_size: Tuple[int, int]) -> Tuple[int, int]:
    return (
        canvas_size[0] // 2 - content_size[0] // 2,
        canvas_size[1] // 2 - content_size[1] // 2,
    )


def _rgba(color: Sequence[int]) -> Tuple[int, int, int, int]:
    values = tuple(int(c) for c in color)
    if len(values) == 3:
        return (*values, 255)
    if len(values) != 4:
        raise CompositeError(f"Background color must have 3 or 4 channels, got {color!r}")
    return values


def resize_to_fit(image: Image.Image, size: int) -> Image.Image:
    """Aspect-preserving resize plus the fixed sharpening pass."""

    if image.width <= 0 or image.height <= 0:
        raise ResizeError(f"Cannot resize an empty image ({image.width}x{image.height})")

    source = image if image.mode == "RGBA" else image.convert("RGBA")
    resized = source.resize(fit_dimensions(image.width, image.height, size), RESAMPLE)
    return resized.filter(SHARPEN)


def compose_thumbnail(
    image: Image.Image,
    profile: TransformProfile,
    background: Sequence[int],
) -> Image.Image:
    """Render one profile of ``image`` padded with ``background``.

    Args:
        image: Decoded source image; never modified.
        profile: Target rendition. A size of 0 or None returns ``image`` itself.
        background: RGBA (or RGB) fill for the padding.

    Returns:
        A new ``size x size`` RGBA image with the resized source centred on it.

    Raises:
        ResizeError: if the profile size is negative or not an integer.
        CompositeError: if the canvas cannot be built.
    """

    size = profile.size
    if not size:
        return image
    if isinstance(size, bool) or not isinstance(size, int):
        raise ResizeError(f"Profile {profile.name!r} size must be an integer, got {size!r}")
    if size < 0:
        raise ResizeError(f"Profile {profile.name!r} has a negative size: {size}")

    content = resize_to_fit(image, size)
    if content.width > size or content.height > size:
        raise CompositeError(f"Resized image {content.size} does not fit a {size}x{size} canvas")

    try:
        canvas = Image.new("RGBA", (size, size), _rgba(background))
    except (ValueError, MemoryError) as exc:
        raise CompositeError(f"Could not allocate a {size}x{size} canvas: {exc}") from exc

    canvas.alpha_composite(content, dest=center_offset(canvas.size, content.size))
    return canvas


__all__ = ["compose_thumbnail", "resize_to_fit", "fit_dimensions", "center_offset", "SHARPEN", "RESAMPLE"]
