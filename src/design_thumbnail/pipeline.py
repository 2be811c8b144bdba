"""Pipeline helpers: decode, estimate, render every profile, encode and upload."""

from __future__ import annotations

import io
import sys
import urllib.parse
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from PIL import Image, UnidentifiedImageError

from background_estimation import CROP_SIZE, Color, estimate_background_color
from thumbnail_composition import compose_thumbnail

from . import config
from .errors import DecodeError, EncodeError, StorageError, ThumbnailError
from .profiles import DEFAULT_PROFILES, TransformProfile
from .storage import ObjectRef, ObjectStore, S3ObjectStore, parse_object_key

QUALITY_FORMATS = ("JPEG", "WEBP")


@dataclass
class RenditionReport:
    background: Color
    renditions: Dict[str, Image.Image] = field(default_factory=dict)
    failures: Dict[str, ThumbnailError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass
class ProcessResult:
    bucket: str
    key: str
    ref: ObjectRef
    background: Color
    uploaded: Dict[str, str] = field(default_factory=dict)
    failures: Dict[str, ThumbnailError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def decode_image(data: bytes) -> Image.Image:
    """Decode raw bytes into a fully loaded image; the format is auto-detected."""

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeError(f"Could not decode image ({len(data)} bytes): {exc}") from exc
    return image


def encode_image(image: Image.Image, profile: TransformProfile) -> bytes:
    """Serialise a rendition with the profile's format and quality."""

    fmt = profile.format.upper()
    if fmt == "JPEG" and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")

    params: Dict[str, Any] = {}
    if fmt in QUALITY_FORMATS:
        params["quality"] = profile.quality

    buffer = io.BytesIO()
    try:
        image.save(buffer, format=fmt, **params)
    except (KeyError, OSError, ValueError) as exc:
        raise EncodeError(f"Could not encode profile {profile.name!r} as {fmt}: {exc}") from exc
    return buffer.getvalue()


def render_renditions(
    image: Image.Image,
    profiles: Mapping[str, TransformProfile],
    *,
    crop_size: int = CROP_SIZE,
    fail_fast: bool = False,
    max_workers: int = 1,
) -> RenditionReport:
    """Estimate the background once, then compose every profile from the same source.

    With ``fail_fast`` the first profile error propagates. Otherwise failures
    are collected per profile and the remaining profiles still render.
    ``max_workers > 1`` renders profiles on a thread pool; results keep the
    profile order either way.
    """

    report = RenditionReport(background=estimate_background_color(image, crop_size))

    if max_workers > 1 and len(profiles) > 1:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="rendition") as pool:
            futures = {
                name: pool.submit(compose_thumbnail, image, profile, report.background)
                for name, profile in profiles.items()
            }
            for name, future in futures.items():
                try:
                    report.renditions[name] = future.result()
                except ThumbnailError as exc:
                    if fail_fast:
                        for pending in futures.values():
                            pending.cancel()
                        raise
                    report.failures[name] = exc
        return report

    for name, profile in profiles.items():
        try:
            report.renditions[name] = compose_thumbnail(image, profile, report.background)
        except ThumbnailError as exc:
            if fail_fast:
                raise
            report.failures[name] = exc
    return report


def process_object(
    store: ObjectStore,
    bucket: str,
    key: str,
    profiles: Mapping[str, TransformProfile] | None = None,
    *,
    output_bucket: str | None = None,
    crop_size: int = CROP_SIZE,
    fail_fast: bool = False,
    max_workers: int = 1,
) -> ProcessResult:
    """Download one uploaded image, render every profile and upload the results."""

    if profiles is None:
        profiles = DEFAULT_PROFILES
    ref = parse_object_key(key)

    print(f"[process] {key} in bucket {bucket}")
    image = decode_image(store.download(bucket, key))
    report = render_renditions(image, profiles, crop_size=crop_size, fail_fast=fail_fast, max_workers=max_workers)
    print(f"[background] {ref.model}/{ref.id}: {report.background}")

    result = ProcessResult(bucket=bucket, key=key, ref=ref, background=report.background, failures=dict(report.failures))
    for name, rendition in report.renditions.items():
        profile = profiles[name]
        try:
            body = encode_image(rendition, profile)
        except EncodeError as exc:
            if fail_fast:
                raise
            result.failures[name] = exc
            continue
        out_key = profile.output_key(ref.model, ref.id)
        try:
            store.upload(output_bucket or bucket, out_key, body, profile.mime_type)
        except StorageError as exc:
            if fail_fast:
                raise
            result.failures[name] = exc
            continue
        result.uploaded[name] = out_key
        print(f"[upload] {name} -> {output_bucket or bucket}/{out_key}")

    for name, exc in result.failures.items():
        print(f"[error] {key} profile {name}: {exc}", file=sys.stderr)
    return result


def process_event(
    event: Mapping[str, Any],
    store: ObjectStore,
    profiles: Mapping[str, TransformProfile] | None = None,
    *,
    fail_fast: bool = False,
    **kwargs: Any,
) -> List[ProcessResult | ThumbnailError]:
    """Process each S3 record in order; per-record errors are returned unless ``fail_fast``."""

    outcomes: List[ProcessResult | ThumbnailError] = []
    for record in event.get("Records", []):
        bucket = record["s3"]["bucket"]["name"]
        key = urllib.parse.unquote_plus(record["s3"]["object"]["key"])
        try:
            outcomes.append(process_object(store, bucket, key, profiles, fail_fast=fail_fast, **kwargs))
        except ThumbnailError as exc:
            if fail_fast:
                raise
            print(f"[error] {bucket}/{key}: {exc}", file=sys.stderr)
            outcomes.append(exc)
    return outcomes


def handle_s3_event(
    event: Mapping[str, Any],
    store: ObjectStore,
    profiles: Mapping[str, TransformProfile] | None = None,
    **kwargs: Any,
) -> str:
    outcomes = process_event(event, store, profiles, **kwargs)
    return f"{len(outcomes)} records processed"


def lambda_handler(event: Mapping[str, Any], context: Any) -> str:
    """AWS Lambda entry point wired to the default profiles and a boto3 S3 client."""

    return handle_s3_event(
        event,
        S3ObjectStore(),
        output_bucket=config.default_bucket(),
        crop_size=config.crop_size(),
    )


__all__ = [
    "RenditionReport",
    "ProcessResult",
    "decode_image",
    "encode_image",
    "render_renditions",
    "process_object",
    "process_event",
    "handle_s3_event",
    "lambda_handler",
]
