"""
Tests for the database debug endpoints (/api/debug/mongo).
"""

from unittest.mock import patch

import pytest


@pytest.fixture
def debug_db(mock_db):
    """Point the debug router at the mock database."""
    async def _get_database():
        return mock_db

    with patch("panel_api.routers.debug.get_database", side_effect=_get_database):
        yield mock_db


class TestDebugCollections:

    @pytest.mark.asyncio
    async def test_lists_all_collections_sorted(self, client, authenticated, debug_db):
        await debug_db.logs.insert_one({"a": 1})
        await debug_db.botconfigs.insert_one({"a": 1})

        response = client.get("/api/debug/mongo/collections")

        assert response.status_code == 200
        data = response.json()
        assert data["db"] == "panel_test"
        assert data["collections"] == ["botconfigs", "logs"]

    def test_disabled_in_production(self, client, authenticated, debug_db, override_settings, make_settings):
        override_settings(make_settings(environment="production"))

        response = client.get("/api/debug/mongo/collections")

        assert response.status_code == 403


class TestDebugGuildConfig:

    @pytest.mark.asyncio
    async def test_finds_config_across_candidates(self, client, authenticated, debug_db):
        await debug_db.guild_configs.insert_one({"guildId": "42", "antispam": True})

        response = client.get("/api/debug/mongo/guild-config/42")

        assert response.status_code == 200
        data = response.json()
        assert data["tried"][0] == "guildconfigurations"
        assert "guild_configs" in data["tried"]
        assert len(data["tried"]) == len(set(data["tried"]))
        assert [f["collection"] for f in data["found"]] == ["guild_configs"]
        assert isinstance(data["found"][0]["doc"]["_id"], str)

    def test_extra_collection_tried_first(self, client, authenticated, debug_db):
        response = client.get("/api/debug/mongo/guild-config/42", params={"collection": "legacy_configs"})

        assert response.json()["tried"][0] == "legacy_configs"
        assert response.json()["found"] == []

    def test_invalid_collection_name(self, client, authenticated, debug_db):
        response = client.get("/api/debug/mongo/guild-config/42", params={"collection": "x y"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid collection name"

    @pytest.mark.asyncio
    async def test_extra_collection_ignores_dev_db_allowlist(self, client, authenticated, debug_db):
        """Any pattern-valid collection is read, allowlisted or not."""
        await debug_db.legacy_configs.insert_one({"guildId": "42", "legacy": True})

        response = client.get("/api/debug/mongo/guild-config/42", params={"collection": "legacy_configs"})

        assert response.status_code == 200
        found = response.json()["found"]
        assert found[0]["collection"] == "legacy_configs"
        assert found[0]["doc"]["legacy"] is True

    def test_guild_config_disabled_in_production(
        self, client, authenticated, debug_db, override_settings, make_settings
    ):
        override_settings(make_settings(environment="production"))

        response = client.get("/api/debug/mongo/guild-config/42", params={"collection": "legacy_configs"})

        assert response.status_code == 403
