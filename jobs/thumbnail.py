"""
Thumbnail handlers for each source kind.

    image        → still pipeline on the object bytes
    audio-cover  → the object is the cover art image, still pipeline too
    video        → one frame extracted with ffmpeg, then the still pipeline

Example result (ThumbnailResult.to_dict()):
    {
        "encoded_payload": "/9j/4AAQSkZJRg...",
        "width": 20,
        "height": 11,
        "size_bytes": 631,
        "mime_type": "image/jpeg"
    }
"""

from jobs.base import AbstractJobHandler
from models.enums import SourceKind
from models.media import MediaBuffer, ThumbnailRequest, ThumbnailResult
from thumbnail.pipeline import PipelineContext, process_image, process_video


class ImageThumbnailJob(AbstractJobHandler):

    def run(self, ctx: PipelineContext, media: MediaBuffer, request: ThumbnailRequest) -> ThumbnailResult:
        return process_image(ctx, media, request)

    @property
    def source_kind(self) -> SourceKind:
        return SourceKind.IMAGE


class AudioCoverThumbnailJob(ImageThumbnailJob):

    @property
    def source_kind(self) -> SourceKind:
        return SourceKind.AUDIO_COVER


class VideoThumbnailJob(AbstractJobHandler):

    def run(self, ctx: PipelineContext, media: MediaBuffer, request: ThumbnailRequest) -> ThumbnailResult:
        return process_video(ctx, media, request)

    @property
    def source_kind(self) -> SourceKind:
        return SourceKind.VIDEO
