"""
Shared enumerations used across the entire project.

Using Python enums (inheriting from str) means:
- They serialize to JSON automatically ("video", not "SourceKind.VIDEO")
- They work as FastAPI request fields
- Typos become immediate errors instead of silent bugs
"""

import enum


class DetectedFormat(str, enum.Enum):
    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"
    WEBP = "WebP"
    BMP = "BMP"
    TIFF = "TIFF"
    UNKNOWN = "Unknown"        # valid result, only used in diagnostics


class SourceKind(str, enum.Enum):
    IMAGE = "image"              # still image, processed directly
    VIDEO = "video"              # one frame is extracted with ffmpeg first
    AUDIO_COVER = "audio-cover"  # cover art of an audio file (a still image)
