"""
Pydantic schemas for the thumbnail endpoints.

Byte payloads travel as base64 strings inside JSON (Base64Bytes decodes
them before our code runs). A body that is not valid JSON, or whose
payload is not valid base64, gets a 422 from FastAPI. Everything else,
including empty or oversized payloads, is answered with 200 and
`success: false`.
"""

from typing import Optional

from pydantic import BaseModel, Base64Bytes, Field


class ImageThumbnailRequest(BaseModel):
    """Request body for POST /thumbnails/image."""

    image_data: Base64Bytes
    mime_type: str = ""
    width: int = Field(default=0, description="<= 0 uses the configured default (20)")
    height: int = Field(default=0, description="<= 0 derives height from the aspect ratio")
    quality: int = Field(default=0, description="JPEG quality 1-100, anything else uses the default (40)")
    blur: bool = True


class VideoThumbnailRequest(BaseModel):
    """Request body for POST /thumbnails/video."""

    video_data: Base64Bytes
    mime_type: str = ""
    timestamp: Optional[str] = Field(
        default=None,
        examples=["00:00:01.000"],
        description="Frame position as HH:MM:SS.mmm",
    )
    width: int = 0
    height: int = 0
    quality: int = 0
    blur: bool = True


class ImageDimensionsRequest(BaseModel):
    """Request body for POST /images/dimensions."""

    image_data: Base64Bytes
    mime_type: str = ""


class ThumbnailResponse(BaseModel):
    success: bool
    error_message: str = ""
    encoded_payload: str = ""
    mime_type: str = ""
    width: int = 0
    height: int = 0
    size_bytes: int = 0


class ImageDimensionsResponse(BaseModel):
    success: bool
    error_message: str = ""
    width: int = 0
    height: int = 0
    size_bytes: int = 0
