"""
Pure helpers for shaping Discord objects for the panel.
"""
from typing import Any, Optional
from urllib.parse import urlencode

from panel_api.config import Settings

DISCORD_AUTHORIZE_URL = "https://discord.com/oauth2/authorize"
DISCORD_CDN = "https://cdn.discordapp.com"

CATEGORY_CHANNEL_TYPE = 4


def user_avatar_url(user_id: Optional[str], avatar: Optional[str], size: int = 128) -> Optional[str]:
    """Avatar URL, or Discord's default embed avatar when the user has none."""
    if not user_id:
        return None
    if not avatar:
        return f"{DISCORD_CDN}/embed/avatars/0.png?size={size}"
    return f"{DISCORD_CDN}/avatars/{user_id}/{avatar}.png?size={size}"


def guild_icon_url(guild_id: Optional[str], icon: Optional[str], size: int = 64) -> Optional[str]:
    if not guild_id or not icon:
        return None
    return f"{DISCORD_CDN}/icons/{guild_id}/{icon}.png?size={size}"


def bot_invite_url(settings: Settings, guild_id: Optional[str] = None) -> Optional[str]:
    """OAuth URL that adds the bot to a guild (pre-selected when `guild_id` is set)."""
    client_id = settings.discord_bot_id or settings.discord_client_id
    if not client_id:
        return None

    params = {
        "client_id": client_id,
        "scope": "bot applications.commands",
        "permissions": settings.discord_bot_invite_permissions or "0",
        "disable_guild_select": "true",
    }
    if guild_id:
        params["guild_id"] = guild_id

    return f"{DISCORD_AUTHORIZE_URL}?{urlencode(params)}"


def bot_info_from_settings(settings: Settings) -> Optional[dict[str, Any]]:
    """Bot identity as configured, without calling Discord."""
    if not settings.discord_bot_id:
        return None
    return {
        "id": settings.discord_bot_id,
        "username": settings.discord_bot_username,
        "avatar": settings.discord_bot_avatar,
        "avatarUrl": user_avatar_url(settings.discord_bot_id, settings.discord_bot_avatar, size=128),
    }


def normalize_channel(channel: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": channel.get("id"),
        "name": channel.get("name"),
        "type": channel.get("type"),
        "parent_id": channel.get("parent_id"),
        "position": channel.get("position") or 0,
    }


def channel_sort_key(channel: dict[str, Any]) -> tuple:
    # Categories first, then by position, then by name
    is_category = channel.get("type") == CATEGORY_CHANNEL_TYPE
    return (0 if is_category else 1, channel.get("position") or 0, str(channel.get("name") or ""))


def sort_channels(channels: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(channels, key=channel_sort_key)


def simplify_message(message: dict[str, Any]) -> dict[str, Any]:
    author = message.get("author")
    return {
        "id": message.get("id"),
        "channel_id": message.get("channel_id"),
        "timestamp": message.get("timestamp"),
        "content": message.get("content"),
        "author": {
            "id": author.get("id"),
            "username": author.get("username"),
            "global_name": author.get("global_name"),
            "avatar": author.get("avatar"),
        } if author else None,
    }
