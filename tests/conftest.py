"""
Global test fixtures for the accounts backend.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Mock Redis (fakeredis)
- Test user factories
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


# =============================================================================
# MongoDB Fixtures (mongomock)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
        client = AsyncMongoMockClient()
        yield client
        client.close()
    except ImportError:
        pytest.skip("mongomock-motor not installed")


@pytest_asyncio.fixture
async def mock_auth_db(mock_async_mongo_client):
    """Provide mock auth_db database with the app's indexes."""
    db = mock_async_mongo_client["auth_db"]
    await db.users.create_index("username", unique=True)
    await db.password_resets.create_index("reset_key", unique=True)
    yield db


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_redis():
    """
    Create an async mock Redis client using fakeredis.
    """
    try:
        import fakeredis.aioredis
        redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)
        yield redis_client
        await redis_client.flushall()
        await redis_client.close()
    except ImportError:
        pytest.skip("fakeredis with aioredis not installed")


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def test_user_data() -> dict:
    """Signup payload for a local user."""
    return {
        "username": "TestUser",
        "email": "testuser@example.com",
        "password": "SecurePassword123!",
        "password_confirm": "SecurePassword123!",
        "security_question": "First pet?",
        "security_answer": "Rex",
    }


@pytest.fixture
def test_user_credentials() -> dict:
    """Login credentials matching test_user_data."""
    return {
        "username": "testuser",
        "password": "SecurePassword123!",
    }


@pytest.fixture
def make_user_doc():
    """Factory for user documents as stored in MongoDB."""
    from app.core.security import hash_password

    def _make(username: str = "testuser", password: str = "SecurePassword123!", **overrides) -> dict:
        doc = {
            "username": username.lower(),
            "email": f"{username.lower()}@example.com",
            "hashed_password": hash_password(password),
            "auth_source": "local",
            "activated": True,
            "is_admin": False,
            "security_question": "First pet?",
            "security_answer": "Rex",
            "last_seen": None,
            "created_at": datetime.now(timezone.utc),
        }
        doc.update(overrides)
        return doc

    return _make


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app():
    """
    Create FastAPI app for testing.

    Note: This imports the actual app and should be used with mocked
    database connections.
    """
    from app.main import app
    return app


@pytest.fixture
def client(app) -> Generator:
    """
    Create a TestClient for the FastAPI app.

    Startup database initialization is skipped.
    """
    with patch("app.main.sync_registry", new=AsyncMock()), \
         patch("app.main.create_indexes", new=AsyncMock()):
        with TestClient(app) as c:
            yield c
