"""
Guild configuration service.

Reads and writes the bot's per-guild configuration document. Every guild has
a configuration even before one is saved: reads merge whatever is stored over
the defaults. Writes accept only known fields, each narrowed to its type.
"""
import re
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from panel_api.core.exceptions import BadRequest
from panel_api.services.document_service import upsert_document_by_keys

# Free-text channel/role ids: a string, otherwise reset to None
CHANNEL_FIELDS = (
    "welcomeChannel",
    "leaveChannel",
    "autoRole",
    "modLogChannel",
    "vocChannelId",
)

# Toggles: applied only when a real boolean is sent
TOGGLE_FIELDS = (
    "antispam",
    "antilink",
    "antiBadWords",
    "autoSanction",
    "antiRaid",
)

SUPPORTED_LANGUAGES = ("fr", "en", "es")
DEFAULT_LANGUAGE = "fr"
MAX_BAD_WORDS = 200
_LANGUAGE_STRIP = re.compile(r"[^a-zA-Z-]")


def default_guild_config() -> dict[str, Any]:
    """A fresh default configuration (never shared between calls)."""
    return {
        "guildId": None,
        "welcomeChannel": None,
        "leaveChannel": None,
        "autoRole": None,
        "antispam": False,
        "antilink": False,
        "modLogChannel": None,
        "antiBadWords": False,
        "badWords": [],
        "autoSanction": False,
        "antiRaid": False,
        "language": DEFAULT_LANGUAGE,
        "vocChannelId": None,
    }


def merge_guild_config(doc: Optional[dict[str, Any]], guild_id: str) -> dict[str, Any]:
    """Overlay a stored (possibly partial) document on the defaults."""
    config = default_guild_config()
    if doc:
        config.update(doc)
    config["guildId"] = guild_id or config["guildId"]

    if not isinstance(config.get("badWords"), list):
        config["badWords"] = []

    return config


def clean_language(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    language = _LANGUAGE_STRIP.sub("", value).lower()[:8]
    return language if language in SUPPORTED_LANGUAGES else None


def clean_bad_words(value: Any) -> Optional[list[str]]:
    if not isinstance(value, list):
        return None
    words = [str(word).strip() for word in value]
    return [word for word in words if word][:MAX_BAD_WORDS]


def clean_guild_config_patch(patch: Any) -> dict[str, Any]:
    """
    Keep only known fields, each narrowed to its expected type.

    Channel ids that are not strings become None; toggles, language and the
    word list are dropped when invalid so the stored value is kept.
    """
    patch = patch if isinstance(patch, dict) else {}
    clean: dict[str, Any] = {}

    for field in CHANNEL_FIELDS:
        value = patch.get(field)
        clean[field] = value if isinstance(value, str) else None

    for field in TOGGLE_FIELDS:
        value = patch.get(field)
        if isinstance(value, bool):
            clean[field] = value

    language = clean_language(patch.get("language"))
    if language is not None:
        clean["language"] = language

    bad_words = clean_bad_words(patch.get("badWords"))
    if bad_words is not None:
        clean["badWords"] = bad_words

    return clean


class GuildConfigService:
    """Service for the bot's guild configuration collection."""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str):
        """Initialize with the panel database and the bot's collection name."""
        self.db = db
        self.collection_name = collection_name
        self.collection = db[collection_name]

    @staticmethod
    def _require_guild_id(guild_id: Optional[str]) -> str:
        guild_id = (guild_id or "").strip()
        if not guild_id:
            raise BadRequest("Missing guildId")
        return guild_id

    async def get_raw(self, guild_id: str) -> Optional[dict[str, Any]]:
        """The stored document, or None if the guild was never configured."""
        guild_id = self._require_guild_id(guild_id)
        return await self.collection.find_one({"guildId": guild_id})

    async def get(self, guild_id: str) -> dict[str, Any]:
        """Full configuration for a guild, defaults included."""
        guild_id = self._require_guild_id(guild_id)
        doc = await self.collection.find_one({"guildId": guild_id})
        return merge_guild_config(doc, guild_id)

    async def set(self, guild_id: str, patch: Any) -> dict[str, Any]:
        """
        Apply a configuration patch and return the resulting configuration.

        Args:
            guild_id: Discord guild id
            patch: Raw request body; unknown or mistyped fields are ignored

        Returns:
            The merged configuration as stored after the write
        """
        guild_id = self._require_guild_id(guild_id)
        fields = clean_guild_config_patch(patch)

        doc = await upsert_document_by_keys(self.collection, {"guildId": guild_id}, fields)
        return merge_guild_config(doc, guild_id)
