"""
High-level thumbnail pipeline.

`process_image` is the main entry point used by both the HTTP API and the
queue worker:

    bytes → detect format → decode (Pillow) → plan size
          → nearest-neighbor resize → box blur (optional)
          → JPEG → base64 → ThumbnailResult

`process_video` extracts one frame with the context's frame extractor and
feeds it through `process_image` as a JPEG still.

Nothing here keeps state between calls. Everything a run needs (logger,
frame extractor, output options) travels in a PipelineContext passed into
every call, so concurrent API requests never share mutable state.
"""

import logging
import time
from dataclasses import dataclass, field
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from models.media import ImageInfo, MediaBuffer, ThumbnailRequest, ThumbnailResult, JPEG_MIME_TYPE
from thumbnail.encoder import encode_base64, encode_jpeg, to_data_uri
from thumbnail.errors import DecodeError
from thumbnail.formats import detect_format
from thumbnail.frames import FrameExtractor
from thumbnail.pixels import PixelBuffer, box_blur, resize_nearest
from thumbnail.sizing import plan_size

BLUR_RADIUS = 1


@dataclass
class PipelineContext:
    frame_extractor: FrameExtractor
    data_uri: bool = False
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))


def _open_image(media: MediaBuffer) -> Image.Image:
    fmt = detect_format(media.data, media.mime_type)
    try:
        image = Image.open(BytesIO(media.data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"failed to decode {fmt.value} image: {e}") from e
    return image


def process_image(ctx: PipelineContext, media: MediaBuffer, request: ThumbnailRequest) -> ThumbnailResult:
    """Full still pipeline from raw bytes to a ThumbnailResult."""
    start = time.monotonic()
    with _open_image(media) as image:
        pixels = PixelBuffer.from_image(image)

    target = plan_size(pixels.width, pixels.height, request.width, request.height)
    thumb = resize_nearest(pixels, target.width, target.height)
    if request.blur:
        thumb = box_blur(thumb, BLUR_RADIUS)

    jpeg = encode_jpeg(thumb, request.quality)
    payload = encode_base64(jpeg)
    if ctx.data_uri:
        payload = to_data_uri(payload)

    ctx.logger.debug(
        f"Thumbnail {pixels.width}x{pixels.height} → {target.width}x{target.height} "
        f"({len(jpeg)} bytes) in {time.monotonic() - start:.3f}s"
    )
    return ThumbnailResult(
        encoded_payload=payload,
        width=target.width,
        height=target.height,
        size_bytes=len(jpeg),
        mime_type=JPEG_MIME_TYPE,
    )


def process_video(ctx: PipelineContext, media: MediaBuffer, request: ThumbnailRequest) -> ThumbnailResult:
    """Extract one frame at request.timestamp, then run the still pipeline on it."""
    frame = ctx.frame_extractor.extract(media.data, request.timestamp, media.mime_type)
    return process_image(ctx, MediaBuffer(frame, JPEG_MIME_TYPE), request)


def probe_dimensions(ctx: PipelineContext, media: MediaBuffer) -> ImageInfo:
    """Decode the image and report its size, without transforming pixels."""
    fmt = detect_format(media.data, media.mime_type)
    try:
        with Image.open(BytesIO(media.data)) as image:
            # Full decode, so truncated or corrupt pixel data is rejected
            image.load()
            width, height = image.size
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"failed to decode {fmt.value} image: {e}") from e

    ctx.logger.debug(f"Probed {fmt.value} image: {width}x{height}")
    return ImageInfo(width=width, height=height, size_bytes=media.size)
