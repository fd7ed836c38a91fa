"""
Job handler registry: maps source kinds to handler instances.

When the worker pops a job from Redis, it knows the message "type"
("image", "video", "audio-cover") but needs the handler to execute it.
This registry does that lookup.
"""

from jobs.base import AbstractJobHandler
from jobs.thumbnail import AudioCoverThumbnailJob, ImageThumbnailJob, VideoThumbnailJob
from models.enums import SourceKind

# Each handler is instantiated once and reused (they're stateless)
_REGISTRY: dict[SourceKind, AbstractJobHandler] = {}


def _register_defaults() -> None:
    for handler_cls in [ImageThumbnailJob, VideoThumbnailJob, AudioCoverThumbnailJob]:
        handler = handler_cls()
        _REGISTRY[handler.source_kind] = handler


_register_defaults()


def get_job_handler(source_kind) -> AbstractJobHandler:
    """Look up a handler by source kind (enum or its string value). Raises ValueError if unknown."""
    try:
        kind = SourceKind(source_kind)
    except ValueError:
        kind = None
    handler = _REGISTRY.get(kind)
    if handler is None:
        raise ValueError(
            f"Unknown job type: '{source_kind}'. Available: {[k.value for k in _REGISTRY]}"
        )
    return handler
