"""
Shared pytest fixtures for the design thumbnail test suite.

Images are synthesised in memory with Pillow; storage is faked so nothing
touches the network.
"""

import io
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import pytest
from PIL import Image

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)


@pytest.fixture
def solid_image() -> Callable[..., Image.Image]:
    """Factory for single-color images."""

    def _make(size: Tuple[int, int] = (64, 64), color=RED, mode: str = "RGB") -> Image.Image:
        return Image.new(mode, size, color)

    return _make


@pytest.fixture
def four_corner_image() -> Image.Image:
    """100x100 white image with a differently colored 30x30 block in each corner."""
    image = Image.new("RGB", (100, 100), WHITE)
    image.paste((10, 10, 10), (0, 0, 30, 30))
    image.paste((20, 20, 20), (70, 0, 100, 30))
    image.paste((30, 30, 30), (0, 70, 30, 100))
    image.paste((40, 40, 40), (70, 70, 100, 100))
    return image


@pytest.fixture
def png_bytes() -> Callable[[Image.Image], bytes]:
    def _encode(image: Image.Image) -> bytes:
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    return _encode


class FakeS3Client:
    """Records put_object calls and serves get_object from an in-memory dict."""

    def __init__(self, objects: Dict[Tuple[str, str], bytes] | None = None) -> None:
        self.objects: Dict[Tuple[str, str], bytes] = dict(objects or {})
        self.puts: List[dict] = []

    def get_object(self, Bucket: str, Key: str) -> dict:
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}

    def put_object(self, **kwargs) -> dict:
        self.puts.append(kwargs)
        self.objects[(kwargs["Bucket"], kwargs["Key"])] = kwargs["Body"]
        return {}


@pytest.fixture
def fake_s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def upload_root(tmp_path: Path) -> Path:
    root = tmp_path / "storage"
    root.mkdir()
    return root
