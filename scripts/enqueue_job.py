"""
Push a thumbnail job onto the Redis queue, the way the content platform does.

Usage:
    python -m scripts.enqueue_job --object-name uploads/sample.jpg
    python -m scripts.enqueue_job --object-name uploads/clip.mp4 --type video --mime-type video/mp4
    python -m scripts.enqueue_job --object-name uploads/sample.jpg --wait 10

The object must already exist in the MinIO bucket. With --wait, the script
polls the results hash and prints the thumbnail once the worker stored it.
"""

import argparse
import json
import time
import uuid

from redis import Redis

from config.settings import settings
from models.enums import SourceKind
from models.media import JobDescriptor
from worker.executor import JobExecutor


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Enqueue a thumbnail job")
    parser.add_argument("--object-name", required=True, help="Object key in the MinIO bucket")
    parser.add_argument("--content-id", default=None, help="Content id (default: random uuid)")
    parser.add_argument("--mime-type", default="image/jpeg")
    parser.add_argument(
        "--type", default=SourceKind.IMAGE.value,
        choices=[k.value for k in SourceKind],
    )
    parser.add_argument("--wait", type=float, default=0.0, help="Seconds to wait for the result")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    redis_client = Redis.from_url(settings.redis_url)

    job = JobDescriptor(
        content_id=args.content_id or str(uuid.uuid4()),
        object_name=args.object_name,
        mime_type=args.mime_type,
        source_kind=SourceKind(args.type),
    )
    redis_client.rpush(settings.QUEUE_NAME, job.to_message())
    print(f"Queued {job.content_id} [{job.source_kind.value}] on '{settings.QUEUE_NAME}'")

    deadline = time.monotonic() + args.wait
    while time.monotonic() < deadline:
        stored = redis_client.hget(JobExecutor.REDIS_RESULTS_KEY, job.content_id)
        if stored:
            print(json.dumps(json.loads(stored), indent=2))
            return
        time.sleep(0.5)

    if args.wait:
        print("No result yet. Check the worker logs.")


if __name__ == "__main__":
    main()
