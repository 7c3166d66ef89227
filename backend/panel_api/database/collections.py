"""
Collection names shared with the Discord bot, and startup indexes.

The bot owns these collections (Mongoose pluralises `GuildConfiguration`
into `guildconfigurations`); the panel only reads and edits them.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


class Collections:
    """Well-known collection names."""
    GUILD_CONFIGURATIONS = "guildconfigurations"
    LOGS = "logs"
    BOT_CONFIGURATIONS = "botconfigurations"
    BOT_CONFIGS = "botconfigs"

    # Always offered by the dev DB admin when no explicit allowlist is set,
    # next to the configured guild config collection.
    FALLBACK_ADMIN = [LOGS, BOT_CONFIGURATIONS, BOT_CONFIGS]

    # Names the bot has used for guild configs across versions
    GUILD_CONFIG_CANDIDATES = [
        "guildconfigurations",
        "GuildConfigurations",
        "GuildConfiguration",
        "guildConfigurations",
        "guild_configs",
    ]


async def create_indexes(db: AsyncIOMotorDatabase, guild_config_collection: str) -> None:
    """Create the lookup indexes the panel relies on."""
    indexes = {
        guild_config_collection: [
            {"keys": [("guildId", 1)]},
        ],
    }
    for collection_name, index_defs in indexes.items():
        collection = db[collection_name]
        for index_def in index_defs:
            keys = index_def["keys"]
            kwargs = {k: v for k, v in index_def.items() if k != "keys"}
            try:
                await collection.create_index(keys, **kwargs)
            except Exception as e:
                # Index might already exist with different options
                logger.warning("Index creation on %s failed: %s", collection_name, e)
