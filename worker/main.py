"""
Worker process entry point.

This is a SEPARATE process from the FastAPI API server. It runs the
JobConsumer loop in a background thread: pop a job from the Redis list,
fetch the object from MinIO, generate the thumbnail, store the result.

The main thread just waits for Ctrl+C (SIGINT) or a kill signal (SIGTERM).
On a signal the consumer stops popping new jobs, lets the in-flight job
finish, and the process exits 0.

To run:
    python -m worker.main
"""

import logging
import signal
import sys
import threading

from redis import Redis
from redis.exceptions import RedisError

from config.settings import settings
from storage.object_store import S3ObjectStore
from thumbnail.frames import FfmpegFrameExtractor
from thumbnail.pipeline import PipelineContext
from worker.consumer import JobConsumer
from worker.executor import JobExecutor

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def build_consumer(redis_client: Redis) -> JobConsumer:
    """Wire the consumer from settings: MinIO store, ffmpeg extractor, executor."""
    ctx = PipelineContext(
        frame_extractor=FfmpegFrameExtractor(
            binary=settings.FFMPEG_BINARY,
            temp_dir=settings.TEMP_DIR,
            timeout=settings.FFMPEG_TIMEOUT_SECONDS,
        ),
        data_uri=settings.THUMBNAIL_DATA_URI,
        logger=logging.getLogger("thumbnail.pipeline"),
    )
    executor = JobExecutor(
        object_store=S3ObjectStore.from_settings(settings),
        ctx=ctx,
        settings=settings,
        redis_client=redis_client,
    )
    return JobConsumer(
        redis_client,
        executor,
        queue_name=settings.QUEUE_NAME,
        pop_timeout=settings.QUEUE_POP_TIMEOUT,
        error_backoff=settings.QUEUE_ERROR_BACKOFF,
        dead_letter=settings.DEAD_LETTER_ENABLED,
    )


def main():
    logger.info(
        f"Starting thumbnail worker (redis={settings.REDIS_HOST}:{settings.REDIS_PORT}, "
        f"queue={settings.QUEUE_NAME}, minio={settings.MINIO_ENDPOINT})"
    )

    redis_client = Redis.from_url(settings.redis_url)
    try:
        redis_client.ping()
    except RedisError as e:
        # Unreachable at startup is fatal; later outages are retried by the loop
        logger.error(f"Failed to connect to Redis: {e}")
        sys.exit(1)

    consumer = build_consumer(redis_client)
    consumer.start()

    # ── Graceful shutdown on Ctrl+C or SIGTERM ──────────────────
    shutdown_event = threading.Event()

    def shutdown(signum, frame):
        logger.info("Received shutdown signal")
        shutdown_event.set()

    signal.signal(signal.SIGTERM, shutdown)
    signal.signal(signal.SIGINT, shutdown)

    logger.info("Worker process running. Press Ctrl+C to stop.")

    # Block the main thread until shutdown signal
    # (using Event.wait() instead of signal.pause() for Windows compatibility)
    shutdown_event.wait()

    consumer.stop()
    redis_client.close()
    logger.info("Thumbnail worker stopped")


if __name__ == "__main__":
    main()
