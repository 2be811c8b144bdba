"""Exception types raised by the thumbnail toolchain."""

from __future__ import annotations


class ThumbnailError(RuntimeError):
    """Base class for every error the toolchain raises on purpose."""


class DecodeError(ThumbnailError):
    pass


class EncodeError(ThumbnailError):
    pass


class InsufficientSampleError(ThumbnailError):
    """No pixel could be sampled while estimating the background color."""


class ResizeError(ThumbnailError):
    pass


class CompositeError(ThumbnailError):
    """Canvas allocation or placement failed; valid inputs never hit this."""


class ObjectKeyError(ThumbnailError):
    pass


class StorageError(ThumbnailError):
    """Reading or writing an object in the backing store failed."""


class ProfileConfigError(ThumbnailError):
    pass


__all__ = [
    "ThumbnailError",
    "DecodeError",
    "EncodeError",
    "InsufficientSampleError",
    "ResizeError",
    "CompositeError",
    "ObjectKeyError",
    "StorageError",
    "ProfileConfigError",
]
