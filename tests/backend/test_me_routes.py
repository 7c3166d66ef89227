"""
Tests for GET /api/me.

These tests verify:
- User, bot and guild payload shaping
- Per-user caching of successful answers
- Discord error mapping, including cached rate limits
"""

import pytest

from panel_api.services.discord_api import DiscordAPIError


@pytest.fixture
def me_client(client, authenticated, use_mock_discord, mock_me_cache, override_settings, make_settings):
    override_settings(make_settings(discord_bot_id="555", discord_bot_username="Sparcky"))
    return client


class TestMe:

    def test_payload(self, me_client, mock_discord_api, mock_me_cache, session_user):
        mock_discord_api.get_current_user_guilds.return_value = [
            {"id": "42", "name": "Guild", "icon": "gi", "permissions": "8"},
            {"id": "43", "name": "No icon", "icon": None},
        ]

        response = me_client.get("/api/me")

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == session_user.id
        assert data["user"]["avatarUrl"].endswith(f"/avatars/{session_user.id}/a1b2c3.png?size=128")
        assert "access_token" not in data["user"]
        assert data["bot"]["username"] == "Sparcky"
        assert data["guilds"][0]["iconUrl"] == "https://cdn.discordapp.com/icons/42/gi.png?size=64"
        assert data["guilds"][0]["permissions"] == "8"
        assert data["guilds"][1]["iconUrl"] is None

        mock_discord_api.get_current_user_guilds.assert_awaited_once_with("discord-access-token")
        mock_me_cache.set.assert_awaited_once_with(session_user.id, data)

    def test_cache_hit_skips_discord(self, me_client, mock_discord_api, mock_me_cache):
        mock_me_cache.get.return_value = {"user": {"id": "1"}, "bot": None, "guilds": []}

        response = me_client.get("/api/me")

        assert response.status_code == 200
        assert response.json()["guilds"] == []
        mock_discord_api.get_current_user_guilds.assert_not_awaited()

    def test_cached_rate_limit_is_429(self, me_client, mock_discord_api, mock_me_cache):
        mock_me_cache.get.return_value = {"error": "Discord rate limited", "retry_after": 2}

        response = me_client.get("/api/me")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "2"
        mock_discord_api.get_current_user_guilds.assert_not_awaited()

    @pytest.mark.parametrize("discord_status", [401, 403])
    def test_invalid_discord_token(self, me_client, mock_discord_api, discord_status, assert_error_response):
        mock_discord_api.get_current_user_guilds.side_effect = DiscordAPIError(discord_status, {})

        response = me_client.get("/api/me")

        assert_error_response(response, 401, "Discord token invalid or expired")

    def test_rate_limit_cached_for_retry_after(self, me_client, mock_discord_api, mock_me_cache, session_user):
        mock_discord_api.get_current_user_guilds.side_effect = DiscordAPIError(
            429, {"message": "You are being rate limited.", "retry_after": 1.2}
        )

        response = me_client.get("/api/me")

        assert response.status_code == 429
        assert response.json() == {"detail": "Discord rate limited", "retry_after": 1.2}
        assert response.headers["Retry-After"] == "1.2"
        mock_me_cache.set.assert_awaited_once_with(
            session_user.id, {"error": "Discord rate limited", "retry_after": 1.2}, 1200
        )

    def test_short_rate_limit_cached_at_least_250ms(self, me_client, mock_discord_api, mock_me_cache):
        mock_discord_api.get_current_user_guilds.side_effect = DiscordAPIError(429, {"retry_after": 0.01})

        me_client.get("/api/me")

        assert mock_me_cache.set.await_args.args[2] == 250

    def test_rate_limit_without_retry_after(self, me_client, mock_discord_api, mock_me_cache):
        mock_discord_api.get_current_user_guilds.side_effect = DiscordAPIError(429, "slow down")

        response = me_client.get("/api/me")

        assert response.status_code == 429
        assert "Retry-After" not in response.headers
        assert mock_me_cache.set.await_args.args[2] == 1000

    def test_other_errors_are_502(self, me_client, mock_discord_api):
        mock_discord_api.get_current_user_guilds.side_effect = DiscordAPIError(500, {"message": "oops"})

        response = me_client.get("/api/me")

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to fetch user data"
        assert response.json()["details"]["discordStatus"] == 500

    def test_session_without_access_token(self, me_client, app, session_user):
        from panel_api.dependencies.auth import get_current_session

        app.dependency_overrides[get_current_session] = lambda: session_user.model_copy(
            update={"access_token": None}
        )

        response = me_client.get("/api/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Missing Discord access token"
