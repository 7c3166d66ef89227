"""
Logs router: reads the guild's moderation log channel through the bot.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from panel_api.admin.query import parse_bounded_int
from panel_api.config import Settings, get_settings
from panel_api.dependencies.auth import CurrentSession
from panel_api.dependencies.services import get_guild_config_service
from panel_api.schemas.guild import GuildLogsResponse
from panel_api.services.discord_api import DiscordAPI, DiscordAPIError, get_discord_api
from panel_api.services.guild_config_service import GuildConfigService
from panel_api.utils.discord import simplify_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/guilds", tags=["Logs"])


@router.get(
    "/{guild_id}/logs",
    response_model=GuildLogsResponse,
    summary="Get mod-log messages",
)
async def get_guild_logs(
    guild_id: str,
    session: CurrentSession,
    limit: Optional[str] = Query(None, description="Number of messages (1-100, default 50)"),
    settings: Settings = Depends(get_settings),
    config_service: GuildConfigService = Depends(get_guild_config_service),
    discord: DiscordAPI = Depends(get_discord_api),
):
    """
    Latest messages of the channel configured as `modLogChannel`.
    """
    bot_token = settings.discord_bot_token
    if not bot_token:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Missing DISCORD_BOT_TOKEN",
        )

    limit = parse_bounded_int(limit, 1, 100, 50)

    config = await config_service.get(guild_id)
    channel_id = config.get("modLogChannel")
    if not channel_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No modLogChannel configured for this guild",
        )

    try:
        messages = await discord.get_channel_messages(channel_id, bot_token, limit=limit)
    except DiscordAPIError as e:
        if e.status_code == status.HTTP_403_FORBIDDEN:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Missing permissions to read log channel",
            )
        if e.status_code == status.HTTP_404_NOT_FOUND:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Log channel not found",
            )
        logger.error("Failed to fetch logs for guild %s: %s", guild_id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch logs",
        )

    return {
        "guildId": guild_id,
        "channelId": channel_id,
        "messages": [simplify_message(m) for m in messages] if isinstance(messages, list) else [],
    }
