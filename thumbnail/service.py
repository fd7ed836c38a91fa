"""
Request validation in front of the pipeline.

ThumbnailService exposes the three operations the content platform calls:

    generate_image_thumbnail(data, mime_type, width, height, quality, blur)
    generate_video_thumbnail(data, mime_type, timestamp, width, height, quality, blur)
    get_image_dimensions(data, mime_type)

Every operation returns a response object with `success` and
`error_message`. Business failures (empty payload, oversized payload,
undecodable image, ffmpeg failure) are reported there and never raised, so
the transport layer always answers normally.

Before the pipeline runs, defaults are filled in from settings:
    width <= 0                → DEFAULT_THUMBNAIL_WIDTH
    height <= 0               → DEFAULT_THUMBNAIL_HEIGHT (0 = auto)
    quality outside [1, 100]  → DEFAULT_JPEG_QUALITY
    empty timestamp           → DEFAULT_VIDEO_TIMESTAMP
"""

import logging
import threading
import time
from dataclasses import dataclass, asdict
from typing import Optional

from config.settings import Settings
from models.enums import SourceKind
from models.media import MediaBuffer, ThumbnailRequest, ThumbnailResult
from thumbnail.errors import ThumbnailError
from thumbnail.pipeline import PipelineContext, probe_dimensions, process_image, process_video

logger = logging.getLogger(__name__)


def check_payload(data: bytes, kind: str, limit: int) -> Optional[str]:
    """Return the rejection message for an empty or oversized payload, else None."""
    if not data:
        return f"{kind} data is required"
    if len(data) > limit:
        return f"{kind} size exceeds maximum allowed size of {limit} bytes"
    return None


@dataclass
class ThumbnailResponse:
    success: bool
    error_message: str = ""
    encoded_payload: str = ""
    mime_type: str = ""
    width: int = 0
    height: int = 0
    size_bytes: int = 0

    @classmethod
    def failure(cls, message: str) -> "ThumbnailResponse":
        return cls(success=False, error_message=message)

    @classmethod
    def from_result(cls, result: ThumbnailResult) -> "ThumbnailResponse":
        return cls(
            success=True,
            encoded_payload=result.encoded_payload,
            mime_type=result.mime_type,
            width=result.width,
            height=result.height,
            size_bytes=result.size_bytes,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DimensionsResponse:
    success: bool
    error_message: str = ""
    width: int = 0
    height: int = 0
    size_bytes: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class ThumbnailService:

    def __init__(self, settings: Settings, ctx: PipelineContext):
        self._settings = settings
        self._ctx = ctx
        # Caps how many pipelines run at once across concurrent requests
        self._slots = threading.BoundedSemaphore(max(1, settings.MAX_CONCURRENT_JOBS))

    def build_request(
        self,
        width: int = 0,
        height: int = 0,
        quality: int = 0,
        blur: bool = True,
        source_kind: SourceKind = SourceKind.IMAGE,
        timestamp: Optional[str] = None,
    ) -> ThumbnailRequest:
        """Apply configured defaults to raw caller parameters."""
        s = self._settings
        return ThumbnailRequest(
            width=width if width > 0 else s.DEFAULT_THUMBNAIL_WIDTH,
            height=height if height > 0 else s.DEFAULT_THUMBNAIL_HEIGHT,
            quality=quality if 1 <= quality <= 100 else s.DEFAULT_JPEG_QUALITY,
            blur=blur,
            source_kind=source_kind,
            timestamp=timestamp or s.DEFAULT_VIDEO_TIMESTAMP,
        )

    def generate_image_thumbnail(
        self,
        data: bytes,
        mime_type: str = "",
        width: int = 0,
        height: int = 0,
        quality: int = 0,
        blur: bool = True,
    ) -> ThumbnailResponse:
        logger.info(
            f"Image thumbnail request: mime={mime_type or '-'} size={len(data or b'')} "
            f"width={width} height={height} quality={quality} blur={blur}"
        )
        error = check_payload(data, "image", self._settings.MAX_IMAGE_SIZE)
        if error:
            return ThumbnailResponse.failure(error)

        request = self.build_request(width, height, quality, blur, SourceKind.IMAGE)
        return self._run(process_image, MediaBuffer(data, mime_type), request, "image")

    def generate_video_thumbnail(
        self,
        data: bytes,
        mime_type: str = "",
        timestamp: Optional[str] = None,
        width: int = 0,
        height: int = 0,
        quality: int = 0,
        blur: bool = True,
    ) -> ThumbnailResponse:
        logger.info(
            f"Video thumbnail request: mime={mime_type or '-'} size={len(data or b'')} "
            f"timestamp={timestamp or '-'}"
        )
        error = check_payload(data, "video", self._settings.MAX_VIDEO_SIZE)
        if error:
            return ThumbnailResponse.failure(error)

        request = self.build_request(width, height, quality, blur, SourceKind.VIDEO, timestamp)
        return self._run(process_video, MediaBuffer(data, mime_type), request, "video")

    def get_image_dimensions(self, data: bytes, mime_type: str = "") -> DimensionsResponse:
        error = check_payload(data, "image", self._settings.MAX_IMAGE_SIZE)
        if error:
            return DimensionsResponse(success=False, error_message=error)

        try:
            info = probe_dimensions(self._ctx, MediaBuffer(data, mime_type))
        except ThumbnailError as e:
            logger.error(f"Failed to get image dimensions: {e}")
            return DimensionsResponse(success=False, error_message=str(e))

        return DimensionsResponse(
            success=True,
            width=info.width,
            height=info.height,
            size_bytes=info.size_bytes,
        )

    def _run(self, operation, media: MediaBuffer, request: ThumbnailRequest, kind: str) -> ThumbnailResponse:
        start = time.monotonic()
        with self._slots:
            try:
                result = operation(self._ctx, media, request)
            except ThumbnailError as e:
                logger.error(f"Failed to process {kind}: {e}")
                return ThumbnailResponse.failure(str(e))

        logger.info(
            f"Generated {result.width}x{result.height} {kind} thumbnail "
            f"({result.size_bytes} bytes) in {time.monotonic() - start:.3f}s"
        )
        return ThumbnailResponse.from_result(result)
