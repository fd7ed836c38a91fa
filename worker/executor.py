"""
Job executor: runs a single thumbnail job.

This is the code that actually DOES THE WORK. The consumer loop calls
executor.execute(descriptor), and this method handles the full lifecycle:

    1. Fetch the object bytes from MinIO, rejecting empty or oversized ones
    2. Find the handler for the job's type (image, video, audio-cover)
    3. Run the pipeline with the configured thumbnail defaults
    4. On success: store the result in the Redis results hash
    5. On failure: log it, and push it to the dead-letter list if enabled

Failed jobs are NOT re-queued. The message already left the queue, and a
failure here is request-scoped (bad object, undecodable image, ffmpeg
refused the video), so retrying the same bytes would fail the same way.
"""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

from config.settings import Settings
from jobs.registry import get_job_handler
from models.enums import SourceKind
from models.media import JobDescriptor, MediaBuffer, ThumbnailRequest
from storage.object_store import ObjectStore, StorageError
from thumbnail.errors import ThumbnailError
from thumbnail.pipeline import PipelineContext
from thumbnail.service import check_payload

logger = logging.getLogger(__name__)


class JobExecutor:

    # Redis keys, shared with anything that reads results back
    REDIS_RESULTS_KEY = "thumbnail:results"
    REDIS_DLQ_KEY = "thumbnail:dead_letter"

    def __init__(
        self,
        object_store: ObjectStore,
        ctx: PipelineContext,
        settings: Settings,
        redis_client: Optional[Redis] = None,
    ):
        self._store = object_store
        self._ctx = ctx
        self._settings = settings
        self._redis = redis_client

    def build_request(self, descriptor: JobDescriptor) -> ThumbnailRequest:
        s = self._settings
        return ThumbnailRequest(
            width=s.DEFAULT_THUMBNAIL_WIDTH,
            height=s.DEFAULT_THUMBNAIL_HEIGHT,
            quality=s.DEFAULT_JPEG_QUALITY,
            blur=s.THUMBNAIL_BLUR,
            source_kind=descriptor.source_kind,
            timestamp=s.DEFAULT_VIDEO_TIMESTAMP,
        )

    def execute(self, descriptor: JobDescriptor) -> dict:
        """
        Execute a single job.

        Returns:
            dict with execution status (for logging/debugging)
        """
        content_id = descriptor.content_id
        kind = descriptor.source_kind.value
        logger.info(
            f"Processing thumbnail job {content_id} [{kind}] "
            f"object={descriptor.object_name} mime={descriptor.mime_type or '-'}"
        )

        start_time = time.monotonic()
        try:
            data = self._store.get(descriptor.object_name)
            error = check_payload(data, kind, self._size_limit(descriptor))
            if error:
                logger.error(f"Job {content_id} [{kind}] rejected: {error}")
                return self._fail(descriptor, error)
            handler = get_job_handler(descriptor.source_kind)
            result = handler.run(
                self._ctx,
                MediaBuffer(data, descriptor.mime_type),
                self.build_request(descriptor),
            )
        except (ThumbnailError, StorageError, ValueError) as e:
            logger.error(f"Job {content_id} [{kind}] failed: {e}")
            return self._fail(descriptor, str(e))
        except Exception as e:
            # Anything else is a bug, but it must not take the consumer loop down
            logger.error(f"Job {content_id} [{kind}] crashed: {e}", exc_info=True)
            return self._fail(descriptor, str(e))

        elapsed = time.monotonic() - start_time
        self._store_result(descriptor, result.to_dict())
        logger.info(
            f"Job {content_id} [{kind}] completed in {elapsed:.3f}s "
            f"({result.width}x{result.height}, {result.size_bytes} bytes)"
        )
        return {
            "status": "completed",
            "content_id": content_id,
            "width": result.width,
            "height": result.height,
            "size_bytes": result.size_bytes,
            "execution_time_sec": round(elapsed, 3),
        }

    def _size_limit(self, descriptor: JobDescriptor) -> int:
        if descriptor.source_kind == SourceKind.VIDEO:
            return self._settings.MAX_VIDEO_SIZE
        return self._settings.MAX_IMAGE_SIZE

    def _fail(self, descriptor: JobDescriptor, error_msg: str) -> dict:
        self._push_to_dead_letter(descriptor, error_msg)
        return {"status": "failed", "content_id": descriptor.content_id, "error": error_msg}

    def _store_result(self, descriptor: JobDescriptor, result: dict) -> None:
        """Write the thumbnail to the results hash, keyed by content id."""
        if self._redis is None:
            return
        entry = json.dumps({
            **result,
            "objectName": descriptor.object_name,
            "type": descriptor.source_kind.value,
            "completedAt": datetime.now(timezone.utc).isoformat(),
        })
        try:
            self._redis.hset(self.REDIS_RESULTS_KEY, descriptor.content_id, entry)
        except RedisError as e:
            logger.error(f"Failed to store result for {descriptor.content_id}: {e}")

    def _push_to_dead_letter(self, descriptor: JobDescriptor, error_msg: str) -> None:
        if not self._settings.DEAD_LETTER_ENABLED or self._redis is None:
            return
        dlq_entry = json.dumps({
            "contentId": descriptor.content_id,
            "objectName": descriptor.object_name,
            "mimeType": descriptor.mime_type,
            "type": descriptor.source_kind.value,
            "error": error_msg,
            "failedAt": datetime.now(timezone.utc).isoformat(),
        })
        try:
            self._redis.rpush(self.REDIS_DLQ_KEY, dlq_entry)
        except RedisError as e:
            logger.error(f"Failed to dead-letter job {descriptor.content_id}: {e}")
