"""
FastAPI application factory.

This file:
1. Creates the FastAPI app
2. Builds the ThumbnailService (pipeline context + ffmpeg extractor)
3. Registers all routers (thumbnails, health)

The `lifespan` context manager is FastAPI's way of handling startup/shutdown.
uvicorn owns the process signals: on SIGINT/SIGTERM it stops accepting
connections, lets in-flight requests finish, runs the shutdown half of
`lifespan`, and exits.

To run:  python -m api.main
   or:   uvicorn api.main:app --host 0.0.0.0 --port 50051
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config.settings import settings
from api.dependencies import build_thumbnail_service
from api.routers import health, thumbnails

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Thumbnail API ready: max image {settings.MAX_IMAGE_SIZE} bytes, "
        f"max video {settings.MAX_VIDEO_SIZE} bytes, "
        f"{settings.MAX_CONCURRENT_JOBS} concurrent jobs"
    )

    yield  # app is running and serving requests between startup and shutdown

    logger.info("Thumbnail API shut down")


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    app = FastAPI(
        title="Thumbnail Service",
        description="Blurred JPEG previews from images, audio cover art and video frames",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.thumbnail_service = build_thumbnail_service(settings)

    app.include_router(health.router)
    app.include_router(thumbnails.router)

    return app


# This is what uvicorn imports: `uvicorn api.main:app`
app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
