"""
Job consumer: the sequential loop that pulls thumbnail jobs from Redis.

    ┌──────────────────────────────────────────────────────────┐
    │                      JobConsumer                         │
    │                                                          │
    │   stop requested? ──yes──> exit                          │
    │        │ no                                              │
    │        ▼                                                 │
    │   BLPOP thumbnail-generation (5s) ──timeout──> loop      │
    │        │            └──RedisError──> wait 1s, loop       │
    │        ▼                                                 │
    │   JobDescriptor.from_message ──malformed──> log, drop    │
    │        │                                                 │
    │        ▼                                                 │
    │   JobExecutor.execute (one job at a time)                │
    └──────────────────────────────────────────────────────────┘

BLPOP blocks until a message arrives or the timeout passes, so an idle
worker uses no CPU. The timeout keeps the loop checking the stop event, and
the stop event is only checked between jobs: an ffmpeg call in progress
always finishes before the loop exits.

Connection errors are never fatal here. Redis restarts, network blips and
failovers are logged, the loop waits QUEUE_ERROR_BACKOFF seconds and pops
again.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

from models.media import JobDescriptor
from thumbnail.errors import MalformedJobError
from worker.executor import JobExecutor

logger = logging.getLogger(__name__)

IDLE = "idle"
ERROR = "error"
MALFORMED = "malformed"


class JobConsumer:

    def __init__(
        self,
        redis_client: Redis,
        executor: JobExecutor,
        queue_name: str = "thumbnail-generation",
        pop_timeout: int = 5,
        error_backoff: float = 1.0,
        dead_letter: bool = False,
        stop_event: Optional[threading.Event] = None,
    ):
        self._redis = redis_client
        self._executor = executor
        self._queue_name = queue_name
        self._pop_timeout = pop_timeout
        self._error_backoff = error_backoff
        self._dead_letter = dead_letter
        self._stop_event = stop_event or threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.processed = 0
        self.failed = 0

    @property
    def stop_event(self) -> threading.Event:
        return self._stop_event

    def start(self) -> None:
        """Run the loop in a background thread."""
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run, name="thumbnail-consumer", daemon=True
        )
        self._thread.start()
        logger.info(f"Job consumer started on queue '{self._queue_name}'")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the loop to stop and wait for the in-flight job to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info(
            f"Job consumer stopped ({self.processed} completed, {self.failed} failed)"
        )

    def run(self) -> None:
        """Loop until the stop event is set."""
        logger.info(f"Starting to process jobs from '{self._queue_name}'")
        while not self._stop_event.is_set():
            self.run_once()
        logger.info("Job consumer loop exited")

    def run_once(self) -> str:
        """
        One iteration: pop, decode, execute.

        Returns "idle", "error", "malformed", or the executor's status
        ("completed" / "failed").
        """
        try:
            # Returns (queue_name, raw_json) or None on timeout
            popped = self._redis.blpop([self._queue_name], timeout=self._pop_timeout)
        except RedisError as e:
            logger.error(f"Failed to get job from queue: {e}")
            # wait() instead of sleep() so a shutdown is not delayed
            self._stop_event.wait(self._error_backoff)
            return ERROR

        if popped is None:
            return IDLE

        _, raw = popped
        try:
            descriptor = JobDescriptor.from_message(raw)
        except MalformedJobError as e:
            logger.warning(f"Discarding malformed job message: {e}")
            self._discard(raw, str(e))
            return MALFORMED

        outcome = self._executor.execute(descriptor)
        if outcome["status"] == "completed":
            self.processed += 1
        else:
            self.failed += 1
        return outcome["status"]

    def _discard(self, raw, error_msg: str) -> None:
        if not self._dead_letter:
            return
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        entry = json.dumps({
            "message": raw,
            "error": error_msg,
            "failedAt": datetime.now(timezone.utc).isoformat(),
        })
        try:
            self._redis.rpush(JobExecutor.REDIS_DLQ_KEY, entry)
        except RedisError as e:
            logger.error(f"Failed to dead-letter malformed message: {e}")
