"""
Tests for health check endpoints.

These tests verify:
- Basic health endpoint returns 200
- Readiness check reports MongoDB, Redis and (when enabled) LDAP status
- Health degrades gracefully when services are down
"""

import pytest
from unittest.mock import AsyncMock, patch


@pytest.fixture
def healthy_stores():
    """Patch MongoDB and Redis to answer their pings."""
    with patch("app.routers.health.get_mongo_client") as mock_mongo, \
         patch("app.routers.health.get_redis_client") as mock_redis:

        mock_mongo_client = AsyncMock()
        mock_mongo_client.admin.command = AsyncMock(return_value={"ok": 1})
        mock_mongo.return_value = mock_mongo_client

        mock_redis_client = AsyncMock()
        mock_redis_client.ping = AsyncMock(return_value=True)
        mock_redis.return_value = mock_redis_client

        yield mock_mongo, mock_redis


class TestHealthEndpoint:
    """Tests for GET /health endpoint."""

    def test_health_endpoint_returns_200_when_api_running(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestReadinessEndpoint:
    """Tests for GET /health/ready endpoint."""

    def test_readiness_returns_healthy_with_local_auth(self, client, healthy_stores):
        response = client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["auth_backend"] == "local"
        assert data["checks"]["mongodb"] == "healthy"
        assert data["checks"]["redis"] == "healthy"
        assert "ldap" not in data["checks"]

    def test_readiness_reports_mongodb_unhealthy_when_connection_fails(
        self, client, healthy_stores
    ):
        mock_mongo, _ = healthy_stores
        mock_mongo.side_effect = Exception("Connection refused")

        response = client.get("/health/ready")

        data = response.json()
        assert data["status"] == "degraded"
        assert "unhealthy" in data["checks"]["mongodb"]
        assert data["checks"]["redis"] == "healthy"

    def test_readiness_reports_redis_unhealthy_when_connection_fails(
        self, client, healthy_stores
    ):
        _, mock_redis = healthy_stores
        mock_redis.side_effect = Exception("Connection refused")

        response = client.get("/health/ready")

        data = response.json()
        assert data["status"] == "degraded"
        assert "unhealthy" in data["checks"]["redis"]

    def test_readiness_checks_ldap_when_enabled(self, client, healthy_stores, ldap_settings):
        with patch("app.routers.health.get_settings", return_value=ldap_settings), \
             patch("app.routers.health.ldap_reachable", return_value=True):
            response = client.get("/health/ready")

        data = response.json()
        assert data["status"] == "healthy"
        assert data["auth_backend"] == "ldap"
        assert data["checks"]["ldap"] == "healthy"

    def test_readiness_degraded_when_ldap_unreachable(self, client, healthy_stores, ldap_settings):
        with patch("app.routers.health.get_settings", return_value=ldap_settings), \
             patch("app.routers.health.ldap_reachable", return_value=False):
            response = client.get("/health/ready")

        data = response.json()
        assert data["status"] == "degraded"
        assert "unhealthy" in data["checks"]["ldap"]
