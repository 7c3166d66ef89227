"""
Guilds router: guild details with channels, and the bot's guild configuration.
"""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from panel_api.config import Settings, get_settings
from panel_api.dependencies.auth import CurrentSession
from panel_api.dependencies.services import get_guild_config_service
from panel_api.schemas.guild import GuildConfigResponse
from panel_api.services.discord_api import DiscordAPI, DiscordAPIError, get_discord_api
from panel_api.services.guild_config_service import GuildConfigService, merge_guild_config
from panel_api.utils.discord import (
    bot_invite_url,
    guild_icon_url,
    normalize_channel,
    sort_channels,
    user_avatar_url,
)
from panel_api.utils.encoding import to_jsonable

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/guilds", tags=["Guilds"])


def _bot_absent_payload(
    guild_id: str,
    settings: Settings,
    config: dict[str, Any],
) -> dict[str, Any]:
    return {
        "botInGuild": False,
        "inviteUrl": bot_invite_url(settings, guild_id),
        "guild": {"id": guild_id},
        "bot": {
            "id": settings.discord_bot_id,
            "username": settings.discord_bot_username,
            "avatarUrl": user_avatar_url(settings.discord_bot_id, settings.discord_bot_avatar, size=128),
            "status": "absent",
        },
        "channels": [],
        "config": config,
        "error": "Bot is not in this guild (or missing permissions)",
    }


@router.get(
    "/{guild_id}",
    summary="Get guild details",
)
async def get_guild(
    guild_id: str,
    session: CurrentSession,
    settings: Settings = Depends(get_settings),
    config_service: GuildConfigService = Depends(get_guild_config_service),
    discord: DiscordAPI = Depends(get_discord_api),
):
    """
    Guild info, bot identity, sorted channels and the bot configuration.

    When the bot is not in the guild (Discord answers 403/404) the response is
    still 200, with `botInGuild: false` and an invite URL.
    """
    bot_token = settings.discord_bot_token
    if not bot_token:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Missing DISCORD_BOT_TOKEN",
                "hint": "Set DISCORD_BOT_TOKEN so the panel can read channels and check bot membership.",
            },
        )

    try:
        bot_user = await discord.get_current_user(bot_token, bot=True)
        guild = await discord.get_guild(guild_id, bot_token)
        channels_data = await discord.get_guild_channels(guild_id, bot_token)
    except DiscordAPIError as e:
        if e.status_code in (status.HTTP_403_FORBIDDEN, status.HTTP_404_NOT_FOUND):
            config = await config_service.get(guild_id)
            return to_jsonable(_bot_absent_payload(guild_id, settings, config))

        logger.error("Failed to fetch guild %s: %s", guild_id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch guild details",
        )

    channels = (
        sort_channels([normalize_channel(c) for c in channels_data])
        if isinstance(channels_data, list)
        else []
    )

    raw_doc = await config_service.get_raw(guild_id)
    config = merge_guild_config(raw_doc, guild_id)

    if not settings.is_production:
        logger.debug(
            "Guild config loaded: guild=%s db=%s collection=%s has_doc=%s mod_log=%s",
            guild_id,
            config_service.db.name,
            config_service.collection_name,
            raw_doc is not None,
            config.get("modLogChannel"),
        )

    return to_jsonable({
        "botInGuild": True,
        "inviteUrl": None,
        "guild": {
            "id": guild.get("id"),
            "name": guild.get("name"),
            "icon": guild.get("icon"),
            "iconUrl": guild_icon_url(guild.get("id"), guild.get("icon"), size=128),
            "owner_id": guild.get("owner_id"),
        },
        "bot": {
            "id": bot_user.get("id"),
            "username": bot_user.get("username"),
            "avatarUrl": user_avatar_url(bot_user.get("id"), bot_user.get("avatar"), size=128),
            "status": "online",
        },
        "channels": channels,
        "config": config,
        "configSource": {
            "db": config_service.db.name,
            "collection": config_service.collection_name,
            "hasDoc": raw_doc is not None,
        },
    })


@router.get(
    "/{guild_id}/config",
    response_model=GuildConfigResponse,
    summary="Get guild configuration",
)
async def get_guild_config(
    guild_id: str,
    session: CurrentSession,
    config_service: GuildConfigService = Depends(get_guild_config_service),
):
    """Configuration for the guild, defaults filled in."""
    config = await config_service.get(guild_id)
    return to_jsonable({"guildId": guild_id, "config": config})


@router.put(
    "/{guild_id}/config",
    response_model=GuildConfigResponse,
    summary="Update guild configuration",
)
async def update_guild_config(
    guild_id: str,
    session: CurrentSession,
    body: Any = Body(None),
    config_service: GuildConfigService = Depends(get_guild_config_service),
):
    """
    Update the guild configuration.

    - **welcomeChannel**, **leaveChannel**, **autoRole**, **modLogChannel**,
      **vocChannelId**: ids as strings; anything else clears the field
    - **antispam**, **antilink**, **antiBadWords**, **autoSanction**,
      **antiRaid**: booleans; other values are ignored
    - **language**: one of `fr`, `en`, `es`
    - **badWords**: list of words (max 200)
    """
    config = await config_service.set(guild_id, body)
    return to_jsonable({"guildId": guild_id, "config": config})
