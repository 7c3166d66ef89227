"""
Global test fixtures for the Discord panel API.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Mock Redis (fakeredis)
- Settings factory
- Session user and token factories
- FastAPI test client wired to the mock database
"""

import sys
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def make_settings():
    """
    Factory for Settings that ignores any local .env file.

    Usage:
        def test_something(make_settings):
            settings = make_settings(environment="production")
    """
    from panel_api.config import Settings

    def _make(**overrides):
        values = {
            "environment": "development",
            "enable_dev_db_admin": "",
            "dev_db_allowed_collections": "",
            "bot_guild_config_collection": "guildconfigurations",
            "mongodb_db": "panel_test",
            "jwt_secret": "test-secret",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings):
    """Development settings with the default allowlist."""
    return make_settings()


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest.fixture
def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.

    This provides an in-memory MongoDB that behaves like the real thing
    for testing purposes.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
    except ImportError:
        pytest.skip("mongomock-motor not installed")
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest.fixture
def mock_db(mock_async_mongo_client):
    """Mock panel database."""
    return mock_async_mongo_client["panel_test"]


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
    except ImportError:
        pytest.skip("fakeredis with aioredis not installed")
    redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.aclose()


# =============================================================================
# Session Fixtures
# =============================================================================

@pytest.fixture
def discord_user() -> dict:
    """A Discord user object as returned by /users/@me."""
    return {
        "id": "111111111111111111",
        "username": "moderator",
        "avatar": "a1b2c3",
        "discriminator": "0",
    }


@pytest.fixture
def session_user(discord_user):
    """The decoded session for `discord_user`."""
    from panel_api.models.session import SessionUser

    return SessionUser(
        id=discord_user["id"],
        username=discord_user["username"],
        avatar=discord_user["avatar"],
        access_token="discord-access-token",
    )


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app():
    """
    FastAPI app for testing.

    Dependency overrides set by a test are cleared afterwards.
    """
    from panel_api.main import app

    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app, mock_db) -> Generator:
    """
    Create a TestClient for the FastAPI app.

    Startup index creation is skipped so tests start from an empty database.
    """
    async def _get_database():
        return mock_db

    with patch("panel_api.main.get_database", side_effect=_get_database), \
         patch("panel_api.main.create_indexes", new_callable=AsyncMock):
        with TestClient(app) as c:
            yield c
