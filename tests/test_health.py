"""Tests for the health check endpoint."""

from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tutordesk.api.health import get_uptime_seconds, set_app_start_time
from tutordesk.core.db import get_db
from tutordesk.main import create_app


@pytest_asyncio.fixture
async def health_client(db_session: AsyncSession):
    """Test client for /health with the database dependency overridden."""
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


class TestHealthCheckEndpoint:
    """Test suite for /health endpoint."""

    @pytest.mark.asyncio
    async def test_health_endpoint_returns_200_when_db_ok(self, health_client: AsyncClient):
        response = await health_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["uptime_seconds"] >= 0
        assert data["checks"]["database"]["status"] == "ok"
        assert isinstance(data["checks"]["database"]["response_time_ms"], int)
        assert data["checks"]["uploads"] == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_unwritable_upload_dir_reports_degraded(
        self, health_client: AsyncClient, tmp_path, monkeypatch
    ):
        """Test a missing proof-image directory degrades health but still returns 200."""
        not_a_dir = tmp_path / "uploads.txt"
        not_a_dir.write_text("")
        monkeypatch.setenv("UPLOAD_DIR", str(not_a_dir))

        response = await health_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["checks"]["database"]["status"] == "ok"
        assert data["checks"]["uploads"]["status"] == "down"

    @pytest.mark.asyncio
    async def test_health_needs_no_session(self, health_client: AsyncClient):
        """Test health is reachable without authentication."""
        response = await health_client.get("/health")

        assert response.status_code == 200

    def test_uptime_tracking(self):
        set_app_start_time(datetime.now() - timedelta(hours=1))

        uptime = get_uptime_seconds()

        assert 3590 <= uptime <= 3610
