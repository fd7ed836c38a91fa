"""
Plain data objects that flow through the thumbnail pipeline.

These are deliberately free of Pillow, Redis and FastAPI so that every
layer (pipeline, worker, API) can share them, and tests can build them
without any infrastructure:

- MediaBuffer: raw bytes as received, plus the declared MIME type
- Dimensions: a width/height pair produced by the size planner
- ThumbnailRequest: fully-resolved parameters for one pipeline run
- ThumbnailResult: what a successful run produces
- ImageInfo: result of probing an image's dimensions
- JobDescriptor: a thumbnail job popped from the Redis queue
"""

import json
from dataclasses import dataclass, asdict

from models.enums import SourceKind
from thumbnail.errors import MalformedJobError

JPEG_MIME_TYPE = "image/jpeg"


@dataclass(frozen=True)
class MediaBuffer:
    data: bytes
    mime_type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Dimensions must be non-negative, got {self.width}x{self.height}"
            )

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


@dataclass(frozen=True)
class ThumbnailRequest:
    width: int
    height: int
    quality: int
    blur: bool = True
    source_kind: SourceKind = SourceKind.IMAGE
    timestamp: str = "00:00:01.000"  # only used for video


@dataclass(frozen=True)
class ThumbnailResult:
    encoded_payload: str
    width: int
    height: int
    size_bytes: int                  # length of the JPEG bytes, not of the text
    mime_type: str = JPEG_MIME_TYPE

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ImageInfo:
    width: int
    height: int
    size_bytes: int


@dataclass(frozen=True)
class JobDescriptor:
    """
    One thumbnail job, as pushed by the content platform:

        {"contentId": "...", "objectName": "...", "mimeType": "...", "type": "video"}
    """
    content_id: str
    object_name: str
    mime_type: str
    source_kind: SourceKind

    @classmethod
    def from_message(cls, raw) -> "JobDescriptor":
        """Parse a raw queue message (bytes or str). Raises MalformedJobError."""
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise MalformedJobError(f"Job message is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise MalformedJobError("Job message must be a JSON object")

        content_id = data.get("contentId")
        object_name = data.get("objectName")
        if not isinstance(content_id, str) or not content_id:
            raise MalformedJobError("Job message is missing 'contentId'")
        if not isinstance(object_name, str) or not object_name:
            raise MalformedJobError("Job message is missing 'objectName'")

        try:
            source_kind = SourceKind(data.get("type"))
        except ValueError as e:
            raise MalformedJobError(
                f"Unknown job type: {data.get('type')!r}. "
                f"Available: {[k.value for k in SourceKind]}"
            ) from e

        mime_type = data.get("mimeType") or ""
        if not isinstance(mime_type, str):
            raise MalformedJobError("'mimeType' must be a string")

        return cls(
            content_id=content_id,
            object_name=object_name,
            mime_type=mime_type,
            source_kind=source_kind,
        )

    def to_message(self) -> str:
        return json.dumps({
            "contentId": self.content_id,
            "objectName": self.object_name,
            "mimeType": self.mime_type,
            "type": self.source_kind.value,
        })
