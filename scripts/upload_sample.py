"""
Upload a demo image to the MinIO bucket so a queue job has something to read.

Usage:
    python -m scripts.upload_sample
    python -m scripts.upload_sample --object-name uploads/card.png --format PNG --size 1280x720
    python -m scripts.upload_sample --enqueue

The image is a colour-bar test card. After the worker blurs it down to
20 pixels wide the bars are still visible, which makes it easy to eyeball
a result. With --enqueue the matching job message is pushed right away;
otherwise the script prints the scripts.enqueue_job command to run.
"""

import argparse
import uuid
from io import BytesIO

from PIL import Image, ImageDraw
from redis import Redis

from config.settings import settings
from models.enums import SourceKind
from models.media import JobDescriptor
from storage.object_store import ObjectStore, S3ObjectStore

BAR_COLOURS = [
    (235, 235, 235), (235, 235, 16), (16, 235, 235), (16, 235, 16),
    (235, 16, 235), (235, 16, 16), (16, 16, 235), (16, 16, 16),
]

_MIME_TYPES = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp", "GIF": "image/gif"}


def build_test_card(width: int, height: int, fmt: str = "JPEG") -> bytes:
    img = Image.new("RGB", (width, height), color=BAR_COLOURS[-1])
    draw = ImageDraw.Draw(img)

    bar_width = max(1, width // len(BAR_COLOURS))
    for i, colour in enumerate(BAR_COLOURS):
        draw.rectangle([i * bar_width, 0, (i + 1) * bar_width - 1, height * 2 // 3], fill=colour)

    # Greyscale ramp along the bottom third
    for x in range(width):
        level = x * 255 // max(1, width - 1)
        draw.line([(x, height * 2 // 3 + 1), (x, height)], fill=(level, level, level))

    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def upload_sample(store: ObjectStore, object_name: str, width: int, height: int, fmt: str = "JPEG") -> JobDescriptor:
    """Upload a test card and return the job message that would thumbnail it."""
    mime_type = _MIME_TYPES[fmt]
    store.put(object_name, build_test_card(width, height, fmt), mime_type)
    return JobDescriptor(
        content_id=str(uuid.uuid4()),
        object_name=object_name,
        mime_type=mime_type,
        source_kind=SourceKind.IMAGE,
    )


def _parse_size(value: str) -> tuple[int, int]:
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got '{value}'")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError("width and height must be positive")
    return width, height


def main() -> None:
    parser = argparse.ArgumentParser(description="Upload a sample image for thumbnail jobs")
    parser.add_argument("--object-name", default="uploads/sample.jpg")
    parser.add_argument("--size", type=_parse_size, default=(800, 600), help="WIDTHxHEIGHT")
    parser.add_argument("--format", default="JPEG", choices=sorted(_MIME_TYPES))
    parser.add_argument("--enqueue", action="store_true", help="Also push the job onto the queue")
    args = parser.parse_args()

    width, height = args.size
    job = upload_sample(S3ObjectStore.from_settings(settings), args.object_name, width, height, args.format)
    print(f"Uploaded {args.object_name} ({width}x{height}) to bucket '{settings.MINIO_BUCKET_NAME}'")

    if args.enqueue:
        Redis.from_url(settings.redis_url).rpush(settings.QUEUE_NAME, job.to_message())
        print(f"Queued {job.content_id} on '{settings.QUEUE_NAME}'")
    else:
        print(
            f"Enqueue with: python -m scripts.enqueue_job --object-name {args.object_name} "
            f"--mime-type {job.mime_type}"
        )


if __name__ == "__main__":
    main()
