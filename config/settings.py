"""
Centralized configuration using pydantic-settings.

How it works:
- Reads environment variables automatically (e.g., REDIS_HOST env var → Settings.REDIS_HOST)
- Falls back to defaults defined here if env vars are not set
- Can also read from a .env file in the project root

Both processes (the API and the queue worker) import `settings` from here.
Limits and thumbnail defaults live here too, so the request validator and
the worker apply exactly the same rules.
"""

import tempfile

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── API ─────────────────────────────────────────────────────
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 50051

    # ── Redis (job queue) ───────────────────────────────────────
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str = ""
    REDIS_DB: int = 0

    QUEUE_NAME: str = "thumbnail-generation"
    QUEUE_POP_TIMEOUT: int = 5          # seconds BLPOP waits before looping again
    QUEUE_ERROR_BACKOFF: float = 1.0    # seconds to wait after a Redis error
    DEAD_LETTER_ENABLED: bool = False

    # ── MinIO / S3-compatible object storage ────────────────────
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_BUCKET_NAME: str = "synapse"
    MINIO_USE_SSL: bool = False

    # ── Limits ──────────────────────────────────────────────────
    MAX_CONCURRENT_JOBS: int = 10
    MAX_IMAGE_SIZE: int = 50 * 1024 * 1024    # 50 MiB
    MAX_VIDEO_SIZE: int = 500 * 1024 * 1024   # 500 MiB

    # ── Thumbnail defaults ──────────────────────────────────────
    DEFAULT_THUMBNAIL_WIDTH: int = 20
    DEFAULT_THUMBNAIL_HEIGHT: int = 0   # 0 = derive from aspect ratio
    DEFAULT_JPEG_QUALITY: int = 40
    DEFAULT_VIDEO_TIMESTAMP: str = "00:00:01.000"
    THUMBNAIL_BLUR: bool = True         # blur applied to queue jobs
    THUMBNAIL_DATA_URI: bool = False    # prefix payloads with data:image/jpeg;base64,

    # ── Frame extraction ────────────────────────────────────────
    FFMPEG_BINARY: str = "ffmpeg"
    FFMPEG_TIMEOUT_SECONDS: float = 60.0
    TEMP_DIR: str = tempfile.gettempdir()

    # ── App ─────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    @property
    def redis_url(self) -> str:
        auth = f":{self.REDIS_PASSWORD}@" if self.REDIS_PASSWORD else ""
        return f"redis://{auth}{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def minio_endpoint_url(self) -> str:
        """boto3 wants a full URL; MINIO_ENDPOINT is host:port like the MinIO SDKs."""
        scheme = "https" if self.MINIO_USE_SSL else "http"
        return f"{scheme}://{self.MINIO_ENDPOINT}"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton, import this everywhere
settings = Settings()
