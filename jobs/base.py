"""
Abstract base class for thumbnail job handlers.

Each source kind (image, video, audio-cover) implements this interface.
The worker calls handler.run(ctx, media, request) without knowing which
kind it is; it looks the handler up in the registry by the message's "type".

Strategy pattern:
- AbstractJobHandler = interface
- ImageThumbnailJob, VideoThumbnailJob, AudioCoverThumbnailJob = implementations
- registry.py = factory lookup
"""

from abc import ABC, abstractmethod

from models.enums import SourceKind
from models.media import MediaBuffer, ThumbnailRequest, ThumbnailResult
from thumbnail.pipeline import PipelineContext


class AbstractJobHandler(ABC):

    @abstractmethod
    def run(self, ctx: PipelineContext, media: MediaBuffer, request: ThumbnailRequest) -> ThumbnailResult:
        """
        Produce a thumbnail for the fetched object.

        Raises:
            ThumbnailError: the object could not be turned into a thumbnail.
        """
        ...

    @property
    @abstractmethod
    def source_kind(self) -> SourceKind:
        """The message "type" this handler serves."""
        ...
