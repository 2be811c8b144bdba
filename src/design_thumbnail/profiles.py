"""Rendition profiles: target size, output encoding and storage path template."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

from PIL import Image

from .config import DEFAULT_JPEG_QUALITY
from .errors import ProfileConfigError


@dataclass(frozen=True)
class TransformProfile:
    """One rendition of a source image.

    Fields:
        name: Profile key, e.g. "small".
        size: Side of the square output in pixels. 0 or None stores the source as-is.
        path: Output key template with ``{model}`` and ``{id}`` placeholders.
        format: Pillow format name used when encoding.
        quality: Encoder quality (JPEG/WebP).
        content_type: MIME type for uploads; derived from ``format`` when empty.
    """

    name: str
    size: int | None
    path: str
    format: str = "JPEG"
    quality: int = DEFAULT_JPEG_QUALITY
    content_type: str = ""

    @property
    def is_passthrough(self) -> bool:
        return not self.size

    @property
    def mime_type(self) -> str:
        return self.content_type or Image.MIME.get(self.format.upper(), "application/octet-stream")

    def output_key(self, model: str, object_id: str) -> str:
        return self.path.format(model=model, id=object_id)


DEFAULT_PROFILES: Dict[str, TransformProfile] = {
    "small": TransformProfile(name="small", size=300, path="{model}/{id}/300.jpg", content_type="image/jpeg"),
    "large": TransformProfile(name="large", size=1200, path="{model}/{id}/1200.jpg", content_type="image/jpeg"),
}


def _profile_from_dict(name: str, raw: Mapping[str, Any], default_quality: int) -> TransformProfile:
    if not isinstance(raw, Mapping):
        raise ProfileConfigError(f"Profile {name!r} must be an object, got {type(raw).__name__}")
    if "path" not in raw:
        raise ProfileConfigError(f"Profile {name!r} is missing 'path'")

    size = raw.get("size", 0)
    if size is not None and (isinstance(size, bool) or not isinstance(size, int)):
        raise ProfileConfigError(f"Profile {name!r} has a non-integer size: {size!r}")

    quality = raw.get("quality", default_quality)
    if isinstance(quality, bool) or not isinstance(quality, int) or not 1 <= quality <= 100:
        raise ProfileConfigError(f"Profile {name!r} quality must be 1-100, got {quality!r}")

    return TransformProfile(
        name=name,
        size=size,
        path=str(raw["path"]),
        format=str(raw.get("format", "JPEG")).upper(),
        quality=quality,
        content_type=str(raw.get("content_type", "")),
    )


def parse_profiles(data: Mapping[str, Any], *, default_quality: int = DEFAULT_JPEG_QUALITY) -> Dict[str, TransformProfile]:
    """Build profiles from a ``{name: {size, path, format, quality, content_type}}`` mapping."""

    if not isinstance(data, Mapping) or not data:
        raise ProfileConfigError("Profile configuration must be a non-empty object")
    return {name: _profile_from_dict(name, raw, default_quality) for name, raw in data.items()}


def load_profiles(path: Path | str, *, default_quality: int = DEFAULT_JPEG_QUALITY) -> Dict[str, TransformProfile]:
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError as exc:
        raise ProfileConfigError(f"Profile file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ProfileConfigError(f"Profile file is not valid JSON: {path}: {exc}") from exc
    return parse_profiles(data, default_quality=default_quality)


__all__ = ["TransformProfile", "DEFAULT_PROFILES", "parse_profiles", "load_profiles"]
