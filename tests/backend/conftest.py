"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with backend-specific helpers
for testing FastAPI routes, services, and database operations.
"""

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# Redis Override Fixtures
# =============================================================================

@pytest.fixture
def patch_redis(mock_async_redis):
    """
    Route lockout bookkeeping to fakeredis.

    Usage in tests:
        async def test_something(patch_redis, mock_auth_db):
            ...
    """
    async def _mock():
        return mock_async_redis

    with patch("app.core.rate_limit.get_redis_client", _mock):
        yield mock_async_redis


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def mock_mailer():
    """Mailer double that records reset mails instead of sending them."""
    mailer = MagicMock()
    mailer.mail_reset_key = AsyncMock(return_value=True)
    return mailer


@pytest.fixture
def mock_ldap():
    """LDAP authenticator double; configure ``authenticate`` per test."""
    ldap = MagicMock()
    ldap.url = "ldap://ldap.test:389"
    ldap.authenticate = AsyncMock(return_value="uid=alice,ou=people,dc=example,dc=com")
    return ldap


@pytest.fixture
def auth_service(mock_auth_db, mock_mailer, mock_ldap, patch_redis):
    """AuthService on the mock database with mail and LDAP doubles."""
    from app.services.auth_service import AuthService
    return AuthService(mock_auth_db, ldap=mock_ldap, mailer=mock_mailer)


@pytest.fixture
def feedback_service(mock_auth_db):
    from app.services.feedback_service import FeedbackService
    return FeedbackService(mock_auth_db)


@pytest.fixture
def ldap_settings():
    """Settings with LDAP authentication switched on."""
    from app.config import Settings
    return Settings(auth_use_ldap=True, ldap_url="ldap://ldap.test:389")


# =============================================================================
# App Override Helpers
# =============================================================================

@pytest.fixture
def route_backends():
    """
    Fresh in-memory MongoDB and Redis for route tests.

    Created outside any event loop so the TestClient's loop can use them.
    """
    from mongomock_motor import AsyncMongoMockClient
    import fakeredis.aioredis

    mongo = AsyncMongoMockClient()
    redis = fakeredis.aioredis.FakeRedis(decode_responses=True)
    return mongo, redis


@pytest.fixture
def client_with_mocks(client, route_backends):
    """
    TestClient whose routes use the in-memory MongoDB and Redis.
    """
    mongo, redis = route_backends

    async def get_mongo():
        return mongo

    async def get_redis():
        return redis

    with patch("app.dependencies.auth.get_mongo_client", get_mongo), \
         patch("app.routers.feedback.get_mongo_client", get_mongo), \
         patch("app.core.rate_limit.get_redis_client", get_redis):
        yield client


@pytest.fixture
def route_db(route_backends):
    """auth_db of the route test MongoDB."""
    mongo, _ = route_backends
    return mongo["auth_db"]


@pytest.fixture
def run():
    """Run a coroutine from a synchronous test (seeding, inspection)."""
    def _run(coro):
        return asyncio.run(coro)
    return _run


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, detail_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert "detail" in data
        if detail_contains:
            assert detail_contains.lower() in str(data["detail"]).lower()
    return _assert
