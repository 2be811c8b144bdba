"""Object storage collaborators and key parsing for uploaded images."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from .errors import ObjectKeyError, StorageError

KEY_PATTERN = re.compile(r"(designs|products)/(\d+)/")


@dataclass(frozen=True)
class ObjectRef:
    model: str
    id: str


def parse_object_key(key: str) -> ObjectRef:
    """Extract the owning model and numeric id from a key like ``designs/42/upload.png``.

    ``key`` must already be decoded; event records are unquoted by the caller.
    """

    match = KEY_PATTERN.search(key)
    if not match:
        raise ObjectKeyError(f"Key does not match {KEY_PATTERN.pattern!r}: {key}")
    return ObjectRef(model=match.group(1), id=match.group(2))


class ObjectStore(Protocol):
    """Both methods raise ``StorageError`` when the store refuses the request."""

    def download(self, bucket: str, key: str) -> bytes:
        ...

    def upload(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        ...


class S3ObjectStore:
    """boto3-backed store. Pass ``client`` to reuse or fake an S3 client."""

    def __init__(self, client: Any | None = None) -> None:
        if client is None:
            try:
                import boto3
            except ImportError as exc:  # pragma: no cover - handled at runtime
                raise ImportError("boto3 is required for S3 storage. Install with `pip install boto3`.") from exc
            client = boto3.client("s3")
        self.client = client

    def download(self, bucket: str, key: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()
        except (BotoCoreError, ClientError, OSError) as exc:
            raise StorageError(f"Download of s3://{bucket}/{key} failed: {exc}") from exc

    def upload(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=data, ContentType=content_type)
        except (BotoCoreError, ClientError, OSError) as exc:
            raise StorageError(f"Upload to s3://{bucket}/{key} failed: {exc}") from exc


class LocalObjectStore:
    """Directory-backed store: bucket ``b`` and key ``k`` live at ``root/b/k``."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()

    def _path(self, bucket: str, key: str) -> Path:
        path = (self.root / bucket / key).resolve()
        if self.root not in path.parents:
            raise StorageError(f"Object path escapes store root: {bucket}/{key}")
        return path

    def download(self, bucket: str, key: str) -> bytes:
        path = self._path(bucket, key)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Cannot read {bucket}/{key}: {exc}") from exc

    def upload(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        path = self._path(bucket, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Cannot write {bucket}/{key}: {exc}") from exc


__all__ = ["KEY_PATTERN", "ObjectRef", "parse_object_key", "ObjectStore", "S3ObjectStore", "LocalObjectStore"]
