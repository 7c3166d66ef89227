"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with dependency overrides for
testing FastAPI routes against mock services.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import Depends

from panel_api.admin.guard import AdminGuard
from panel_api.config import Settings, get_settings
from panel_api.dependencies.auth import get_current_session
from panel_api.dependencies.services import (
    get_admin_guard,
    get_document_service,
    get_guild_config_service,
    get_me_cache,
)
from panel_api.services.discord_api import get_discord_api
from panel_api.services.document_service import DocumentService
from panel_api.services.guild_config_service import GuildConfigService


# =============================================================================
# Dependency Override Fixtures
# =============================================================================

@pytest.fixture
def override_settings(app):
    """
    Install a Settings instance for every route dependency.

    Usage:
        def test_something(client, override_settings, make_settings):
            override_settings(make_settings(environment="production"))
    """
    def _override(settings):
        app.dependency_overrides[get_settings] = lambda: settings
        return settings

    return _override


@pytest.fixture
def authenticated(app, session_user, override_settings, settings):
    """
    Bypass the Authorization header check and use development settings.

    Returns the session user the routes will see.
    """
    app.dependency_overrides[get_current_session] = lambda: session_user
    override_settings(settings)
    return session_user


@pytest.fixture
def use_mock_db(app, mock_db):
    """Route the document and guild config services to the mock database."""
    def _document_service(guard: AdminGuard = Depends(get_admin_guard)):
        return DocumentService(mock_db, guard)

    def _guild_config_service(settings: Settings = Depends(get_settings)):
        return GuildConfigService(mock_db, settings.bot_guild_config_collection)

    app.dependency_overrides[get_document_service] = _document_service
    app.dependency_overrides[get_guild_config_service] = _guild_config_service
    return mock_db


# =============================================================================
# Discord Fixtures
# =============================================================================

@pytest.fixture
def mock_discord_api():
    """Create a fully mocked DiscordAPI client."""
    api = MagicMock()
    api.build_authorize_url = MagicMock(
        return_value="https://discord.com/oauth2/authorize?client_id=123&scope=identify+guilds"
    )
    api.exchange_code = AsyncMock()
    api.get_current_user = AsyncMock()
    api.get_current_user_guilds = AsyncMock()
    api.get_guild = AsyncMock()
    api.get_guild_channels = AsyncMock()
    api.get_channel_messages = AsyncMock()
    return api


@pytest.fixture
def use_mock_discord(app, mock_discord_api):
    """Route every Discord call to `mock_discord_api`."""
    app.dependency_overrides[get_discord_api] = lambda: mock_discord_api
    return mock_discord_api


@pytest.fixture
def mock_me_cache(app):
    """A cache that always misses, with recorded writes."""
    cache = MagicMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    app.dependency_overrides[get_me_cache] = lambda: cache
    return cache


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
            assert detail_contains.lower() in data["detail"].lower()
    return _assert
