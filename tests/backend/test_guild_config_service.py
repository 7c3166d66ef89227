"""
Tests for the guild configuration service.

These tests verify:
- Defaults are returned for guilds never configured
- Stored documents are merged over the defaults
- Writes keep only known fields, narrowed to their type
"""

import pytest

from panel_api.core.exceptions import BadRequest
from panel_api.services.guild_config_service import (
    GuildConfigService,
    clean_guild_config_patch,
    default_guild_config,
    merge_guild_config,
)


@pytest.fixture
def config_service(mock_db):
    return GuildConfigService(mock_db, "guildconfigurations")


class TestMergeGuildConfig:
    """Tests for default_guild_config / merge_guild_config."""

    def test_defaults_are_fresh_copies(self):
        first = default_guild_config()
        first["badWords"].append("x")

        assert default_guild_config()["badWords"] == []

    def test_missing_document_yields_defaults(self):
        config = merge_guild_config(None, "42")

        assert config["guildId"] == "42"
        assert config["language"] == "fr"
        assert config["antispam"] is False
        assert config["modLogChannel"] is None

    def test_stored_fields_override_defaults(self):
        config = merge_guild_config({"guildId": "42", "antilink": True, "custom": 1}, "42")

        assert config["antilink"] is True
        assert config["antispam"] is False
        assert config["custom"] == 1

    def test_non_list_bad_words_reset(self):
        config = merge_guild_config({"badWords": "oops"}, "42")

        assert config["badWords"] == []


class TestCleanPatch:
    """Tests for clean_guild_config_patch."""

    def test_channel_fields_become_string_or_none(self):
        clean = clean_guild_config_patch({"welcomeChannel": "123", "leaveChannel": 456})

        assert clean["welcomeChannel"] == "123"
        assert clean["leaveChannel"] is None
        assert clean["modLogChannel"] is None

    def test_toggles_only_accept_booleans(self):
        clean = clean_guild_config_patch({"antispam": True, "antilink": "true", "antiRaid": 1})

        assert clean["antispam"] is True
        assert "antilink" not in clean
        assert "antiRaid" not in clean

    @pytest.mark.parametrize("raw,expected", [("EN", "en"), (" es ", "es"), ("f_r", "fr")])
    def test_language_normalized(self, raw, expected):
        assert clean_guild_config_patch({"language": raw})["language"] == expected

    @pytest.mark.parametrize("raw", ["de", "", 3, None])
    def test_unsupported_language_dropped(self, raw):
        assert "language" not in clean_guild_config_patch({"language": raw})

    def test_bad_words_trimmed_and_capped(self):
        words = ["  a ", "", "b"] + [f"w{i}" for i in range(300)]

        clean = clean_guild_config_patch({"badWords": words})

        assert clean["badWords"][:2] == ["a", "b"]
        assert len(clean["badWords"]) == 200

    def test_unknown_fields_dropped(self):
        clean = clean_guild_config_patch({"guildId": "other", "$set": 1, "prefix": "!"})

        assert "guildId" not in clean
        assert "$set" not in clean
        assert "prefix" not in clean

    def test_non_dict_patch(self):
        clean = clean_guild_config_patch(["x"])

        assert clean["welcomeChannel"] is None


class TestGuildConfigService:
    """Tests for GuildConfigService against the mock database."""

    @pytest.mark.asyncio
    async def test_get_unknown_guild_returns_defaults(self, config_service):
        config = await config_service.get("42")

        assert config == {**default_guild_config(), "guildId": "42"}

    @pytest.mark.asyncio
    async def test_get_raw_returns_none_when_absent(self, config_service):
        assert await config_service.get_raw("42") is None

    @pytest.mark.asyncio
    async def test_set_creates_and_merges(self, config_service, mock_db):
        config = await config_service.set("42", {"modLogChannel": "999", "antispam": True})

        assert config["guildId"] == "42"
        assert config["modLogChannel"] == "999"
        assert config["antispam"] is True
        assert config["language"] == "fr"

        stored = await mock_db.guildconfigurations.find_one({"guildId": "42"})
        assert stored["createdAt"] is not None
        assert stored["updatedAt"] is not None

    @pytest.mark.asyncio
    async def test_set_keeps_toggles_not_sent(self, config_service):
        await config_service.set("42", {"antilink": True, "language": "en"})

        config = await config_service.set("42", {"welcomeChannel": "1"})

        assert config["antilink"] is True
        assert config["language"] == "en"
        assert config["welcomeChannel"] == "1"

    @pytest.mark.asyncio
    async def test_set_clears_unsent_channels(self, config_service):
        await config_service.set("42", {"welcomeChannel": "1"})

        config = await config_service.set("42", {"leaveChannel": "2"})

        assert config["welcomeChannel"] is None
        assert config["leaveChannel"] == "2"

    @pytest.mark.asyncio
    async def test_set_single_document_per_guild(self, config_service, mock_db):
        await config_service.set("42", {})
        await config_service.set("42", {})

        assert await mock_db.guildconfigurations.count_documents({"guildId": "42"}) == 1

    @pytest.mark.asyncio
    async def test_missing_guild_id(self, config_service):
        with pytest.raises(BadRequest) as exc_info:
            await config_service.get("  ")
        assert exc_info.value.message == "Missing guildId"
