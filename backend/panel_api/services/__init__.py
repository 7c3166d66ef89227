"""
Service layer for business logic.
"""
from panel_api.services.document_service import DocumentService, DocumentPage
from panel_api.services.guild_config_service import GuildConfigService
from panel_api.services.discord_api import DiscordAPI, DiscordAPIError, get_discord_api
from panel_api.services.me_cache import MeCache

__all__ = [
    "DocumentService",
    "DocumentPage",
    "GuildConfigService",
    "DiscordAPI",
    "DiscordAPIError",
    "get_discord_api",
    "MeCache",
]
