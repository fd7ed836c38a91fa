"""
Health check endpoint.

Load balancers and container orchestrators (k8s) use it to decide whether
the service is ready to receive traffic. Image thumbnails work without
ffmpeg, so a missing binary is reported but does not fail the check.
"""

import shutil

from fastapi import APIRouter

from config.settings import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict:
    ffmpeg = "ok" if shutil.which(settings.FFMPEG_BINARY) else "missing"
    return {"status": "healthy", "ffmpeg": ffmpeg}
