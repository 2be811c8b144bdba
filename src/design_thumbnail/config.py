"""Environment-driven settings shared by the CLI and the event handler."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

CROP_SIZE_ENV = "DESIGNTHUMB_CROP_SIZE"
JPEG_QUALITY_ENV = "DESIGNTHUMB_JPEG_QUALITY"
BUCKET_ENV = "DESIGNTHUMB_BUCKET"

DEFAULT_CROP_SIZE = 30
DEFAULT_JPEG_QUALITY = 80


def parse_env_line(line: str) -> Tuple[str, str] | None:
    """Split one ``.env`` line into (name, value), or None for blanks and comments.

    An ``export`` prefix is dropped and one pair of matching quotes around the
    value is removed.
    """

    line = line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if not line or line.startswith("#") or "=" not in line:
        return None

    name, value = (part.strip() for part in line.split("=", 1))
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return (name, value) if name else None


def env_file_candidates() -> List[Path]:
    return [
        Path(__file__).resolve().parents[2] / ".env",
        Path.cwd() / ".env",
        Path.home() / ".env",
    ]


def load_env_file(candidates: Iterable[Path] | None = None) -> Dict[str, str]:
    """Export ``DESIGNTHUMB_*`` and other settings found in .env files.

    Files are read in order (project root, cwd, home by default) and missing
    ones are skipped. The first file to define a name wins, and anything
    already set in the process environment is left alone.

    Returns:
        The names and values this call added to ``os.environ``.
    """

    added: Dict[str, str] = {}
    for path in env_file_candidates() if candidates is None else candidates:
        if not path.is_file():
            continue
        pairs = filter(None, map(parse_env_line, path.read_text().splitlines()))
        for name, value in pairs:
            if name not in os.environ:
                os.environ[name] = added[name] = value
    return added


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def crop_size() -> int:
    return env_int(CROP_SIZE_ENV, DEFAULT_CROP_SIZE)


def jpeg_quality() -> int:
    return env_int(JPEG_QUALITY_ENV, DEFAULT_JPEG_QUALITY)


def default_bucket() -> str | None:
    return os.environ.get(BUCKET_ENV) or None
