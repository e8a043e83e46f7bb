"""
Unit tests for the API layer.
"""

import pytest
from unittest.mock import patch, MagicMock
from fastapi.testclient import TestClient

from orgtasks.api.main import app


@pytest.fixture
def client() -> TestClient:
    """Create a test client for the API."""
    return TestClient(app)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_liveness(self, client: TestClient) -> None:
        """Test the liveness probe returns alive."""
        response = client.get("/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    @pytest.mark.parametrize("healthy, expected", [(True, "ready"), (False, "not_ready")])
    def test_readiness(self, client: TestClient, healthy: bool, expected: str) -> None:
        """Readiness reflects the database health check."""
        adapter = MagicMock()
        adapter.health_check.return_value = healthy
        with patch("orgtasks.api.main.get_postgres_adapter", return_value=adapter):
            response = client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == expected
        assert data["checks"]["postgres"] == ("healthy" if healthy else "unhealthy")
        assert "version" in data


def test_metrics_endpoint(client: TestClient) -> None:
    response = client.get("/metrics/")
    assert response.status_code == 200
    assert "orgtasks_audit_write_failures_total" in response.text


def test_request_id_is_echoed(client: TestClient) -> None:
    response = client.get("/health/live", headers={"X-Request-ID": "req-42"})
    assert response.headers["X-Request-ID"] == "req-42"
    assert client.get("/health/live").headers["X-Request-ID"]
