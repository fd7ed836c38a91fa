"""
FastAPI dependency injection.

An endpoint declares `service: ThumbnailService = Depends(get_thumbnail_service)`
and receives the service built at startup. Tests swap it through
app.dependency_overrides, e.g. for a service whose frame extractor is a fake.
"""

import logging

from fastapi import Request

from config.settings import Settings
from thumbnail.frames import FfmpegFrameExtractor
from thumbnail.pipeline import PipelineContext
from thumbnail.service import ThumbnailService


def build_thumbnail_service(settings: Settings) -> ThumbnailService:
    ctx = PipelineContext(
        frame_extractor=FfmpegFrameExtractor(
            binary=settings.FFMPEG_BINARY,
            temp_dir=settings.TEMP_DIR,
            timeout=settings.FFMPEG_TIMEOUT_SECONDS,
        ),
        data_uri=settings.THUMBNAIL_DATA_URI,
        logger=logging.getLogger("thumbnail.pipeline"),
    )
    return ThumbnailService(settings, ctx)


def get_thumbnail_service(request: Request) -> ThumbnailService:
    """Returns the ThumbnailService stored on the app by create_app()."""
    return request.app.state.thumbnail_service
