"""Package for thumbnail composition components."""

from .compositor import center_offset, compose_thumbnail, fit_dimensions, resize_to_fit

__all__ = ["compose_thumbnail", "resize_to_fit", "fit_dimensions", "center_offset"]
