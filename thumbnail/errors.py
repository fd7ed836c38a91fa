"""
Business-failure exceptions raised by the thumbnail pipeline.

Everything deriving from ThumbnailError is a request-scoped failure: bad
input, an undecodable image, ffmpeg refusing a video. The request validator
turns these into `success=False` responses and the queue worker turns them
into log lines. None of them is ever retried inside the pipeline.
"""


class ThumbnailError(Exception):
    """Base class for all pipeline failures."""


class DecodeError(ThumbnailError):
    """The source bytes could not be decoded as an image."""


class EncodeError(ThumbnailError):
    """The transformed pixels could not be encoded as JPEG."""


class FrameExtractionError(ThumbnailError):
    """ffmpeg could not produce a still frame from the video."""

    def __init__(self, message: str, output: str = ""):
        self.output = output
        if output:
            message = f"{message}, output: {output.strip()}"
        super().__init__(message)


class MalformedJobError(ThumbnailError):
    """A queue message could not be turned into a JobDescriptor."""
