"""Tests for the /health endpoint."""

import pytest

from api.routers import health


@pytest.mark.asyncio
async def test_health_check(client):
    """GET /health should return healthy status."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["ffmpeg"] in ("ok", "missing")


@pytest.mark.asyncio
async def test_health_reports_missing_ffmpeg(client, monkeypatch):
    """A missing ffmpeg is reported, but the service is still healthy."""
    monkeypatch.setattr(health.shutil, "which", lambda name: None)
    response = await client.get("/health")
    assert response.json() == {"status": "healthy", "ffmpeg": "missing"}
