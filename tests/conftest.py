"""
Shared test fixtures.

These replace real infrastructure with lightweight in-memory alternatives:
- Redis → fakeredis (pure Python Redis mock)
- MinIO → a dict-backed object store
- ffmpeg → a fake frame extractor returning a canned JPEG
- HTTP server → httpx.AsyncClient with ASGI transport (no network)

This means tests:
- Run without Docker, ffmpeg or network
- Run in milliseconds
- Are fully isolated (each test gets fresh fakes)
"""

import logging
from io import BytesIO

import fakeredis
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from PIL import Image

from api.dependencies import get_thumbnail_service
from api.main import create_app
from config.settings import Settings
from storage.object_store import ObjectNotFoundError
from thumbnail.errors import FrameExtractionError
from thumbnail.pipeline import PipelineContext
from thumbnail.service import ThumbnailService


def make_image_bytes(size=(100, 100), color=(255, 0, 0), fmt="JPEG", mode="RGB") -> bytes:
    img = Image.new(mode, size, color=color)
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


class FakeFrameExtractor:
    """Stands in for ffmpeg: returns `frame` or raises `error`, and records calls."""

    def __init__(self, frame: bytes = b"", error: Exception = None):
        self.frame = frame
        self.error = error
        self.calls = []

    def extract(self, video: bytes, timestamp: str, mime_type: str = "") -> bytes:
        self.calls.append((video, timestamp, mime_type))
        if self.error is not None:
            raise self.error
        return self.frame


class FakeObjectStore:

    def __init__(self, objects=None):
        self.objects = dict(objects or {})

    def get(self, object_name: str) -> bytes:
        if object_name not in self.objects:
            raise ObjectNotFoundError(f"File not found: {object_name}")
        return self.objects[object_name]

    def put(self, object_name: str, data: bytes, content_type: str = "") -> None:
        self.objects[object_name] = data


@pytest.fixture
def image_factory():
    """Build encoded test images: image_factory(size=(w, h), color=..., fmt="PNG")."""
    return make_image_bytes


@pytest.fixture
def jpeg_100():
    """A 100x100 solid red JPEG."""
    return make_image_bytes((100, 100), (255, 0, 0), "JPEG")


@pytest.fixture
def extractor_factory():
    """Build a FakeFrameExtractor(frame=..., error=...)."""
    return FakeFrameExtractor


@pytest.fixture
def frame_extractor():
    return FakeFrameExtractor(frame=make_image_bytes((320, 160), (0, 128, 255), "JPEG"))


@pytest.fixture
def failing_extractor():
    return FakeFrameExtractor(
        error=FrameExtractionError("ffmpeg failed: exit status 1", "moov atom not found")
    )


@pytest.fixture
def object_store():
    return FakeObjectStore()


@pytest.fixture
def test_settings():
    """Settings with small limits so oversize paths are cheap to exercise."""
    return Settings(
        MAX_IMAGE_SIZE=64 * 1024,
        MAX_VIDEO_SIZE=128 * 1024,
        MAX_CONCURRENT_JOBS=2,
        DEFAULT_THUMBNAIL_WIDTH=20,
        DEFAULT_THUMBNAIL_HEIGHT=0,
        DEFAULT_JPEG_QUALITY=40,
        THUMBNAIL_DATA_URI=False,
        DEAD_LETTER_ENABLED=False,
    )


@pytest.fixture
def pipeline_ctx(frame_extractor):
    return PipelineContext(frame_extractor=frame_extractor, logger=logging.getLogger("test.pipeline"))


@pytest.fixture
def service(test_settings, pipeline_ctx):
    return ThumbnailService(test_settings, pipeline_ctx)


@pytest.fixture
def fake_redis():
    """A fake sync Redis instance (in-memory, no real Redis needed)."""
    r = fakeredis.FakeRedis()
    yield r
    r.flushall()


@pytest_asyncio.fixture
async def client(service):
    """
    Create a test HTTP client that talks directly to the FastAPI app.

    dependency_overrides swaps the real service (ffmpeg, env settings) for
    the test one (fake extractor, small limits).
    """
    app = create_app()
    app.dependency_overrides[get_thumbnail_service] = lambda: service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
