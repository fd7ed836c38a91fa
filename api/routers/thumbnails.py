"""
Thumbnail endpoints.

POST /thumbnails/image   → GenerateImageThumbnail
POST /thumbnails/video   → GenerateVideoThumbnail
POST /images/dimensions  → GetImageDimensions

They work like RPC calls: business failures come back as HTTP 200 with
`success: false` and an `error_message`, never as an HTTP error.

The handlers are plain `def` (not `async def`) on purpose: the pipeline is
CPU-bound and ffmpeg blocks, so FastAPI runs them in its threadpool instead
of on the event loop.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_thumbnail_service
from api.schemas.thumbnail import (
    ImageDimensionsRequest,
    ImageDimensionsResponse,
    ImageThumbnailRequest,
    ThumbnailResponse,
    VideoThumbnailRequest,
)
from thumbnail.service import ThumbnailService

router = APIRouter(tags=["thumbnails"])


@router.post("/thumbnails/image", response_model=ThumbnailResponse)
def generate_image_thumbnail(
    body: ImageThumbnailRequest,
    service: ThumbnailService = Depends(get_thumbnail_service),
) -> ThumbnailResponse:
    result = service.generate_image_thumbnail(
        body.image_data,
        mime_type=body.mime_type,
        width=body.width,
        height=body.height,
        quality=body.quality,
        blur=body.blur,
    )
    return ThumbnailResponse(**result.to_dict())


@router.post("/thumbnails/video", response_model=ThumbnailResponse)
def generate_video_thumbnail(
    body: VideoThumbnailRequest,
    service: ThumbnailService = Depends(get_thumbnail_service),
) -> ThumbnailResponse:
    result = service.generate_video_thumbnail(
        body.video_data,
        mime_type=body.mime_type,
        timestamp=body.timestamp,
        width=body.width,
        height=body.height,
        quality=body.quality,
        blur=body.blur,
    )
    return ThumbnailResponse(**result.to_dict())


@router.post("/images/dimensions", response_model=ImageDimensionsResponse)
def get_image_dimensions(
    body: ImageDimensionsRequest,
    service: ThumbnailService = Depends(get_thumbnail_service),
) -> ImageDimensionsResponse:
    result = service.get_image_dimensions(body.image_data, mime_type=body.mime_type)
    return ImageDimensionsResponse(**result.to_dict())
