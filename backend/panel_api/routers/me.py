"""
Current user router: Discord identity, bot identity and the user's guilds.
"""
import logging
import math
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from panel_api.config import Settings, get_settings
from panel_api.dependencies.auth import CurrentSession
from panel_api.dependencies.services import get_me_cache
from panel_api.services.discord_api import DiscordAPI, DiscordAPIError, get_discord_api
from panel_api.services.me_cache import MeCache
from panel_api.utils.discord import bot_info_from_settings, guild_icon_url, user_avatar_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Me"])

RATE_LIMITED = "Discord rate limited"
MIN_RATE_LIMIT_CACHE_MS = 250
DEFAULT_RATE_LIMIT_CACHE_MS = 1000


def _rate_limited_response(retry_after: Any) -> JSONResponse:
    headers = {}
    if isinstance(retry_after, (int, float)) and not isinstance(retry_after, bool):
        headers["Retry-After"] = str(retry_after)
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": RATE_LIMITED, "retry_after": retry_after},
        headers=headers,
    )


@router.get(
    "/me",
    summary="Get current user, bot and guilds",
)
async def get_me(
    session: CurrentSession,
    settings: Settings = Depends(get_settings),
    cache: MeCache = Depends(get_me_cache),
    discord: DiscordAPI = Depends(get_discord_api),
):
    """
    Current Discord user with avatar URL, configured bot, and the user's guilds
    with icon URLs. Cached per user for a few seconds.

    A Discord rate limit is answered with 429 and `Retry-After`, and is itself
    cached for the retry delay so repeated refreshes do not hit Discord.
    """
    if not session.access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Discord access token",
        )

    cached = await cache.get(session.id)
    if cached:
        if cached.get("error") == RATE_LIMITED:
            return _rate_limited_response(cached.get("retry_after"))
        return cached

    try:
        guilds = await discord.get_current_user_guilds(session.access_token)
    except DiscordAPIError as e:
        if e.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Discord token invalid or expired",
            )

        if e.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
            retry_after = e.retry_after
            ttl_ms = (
                max(MIN_RATE_LIMIT_CACHE_MS, math.ceil(retry_after * 1000))
                if retry_after is not None
                else DEFAULT_RATE_LIMIT_CACHE_MS
            )
            await cache.set(session.id, {"error": RATE_LIMITED, "retry_after": retry_after}, ttl_ms)
            return _rate_limited_response(retry_after)

        logger.error("/api/me failed for user %s: %s", session.id, e)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "detail": "Failed to fetch user data",
                "details": {"discordStatus": e.status_code, "discordData": e.data} if e.status_code else None,
            },
        )

    payload = {
        "user": {
            "id": session.id,
            "username": session.username,
            "avatar": session.avatar,
            "avatarUrl": user_avatar_url(session.id, session.avatar, size=128),
        },
        "bot": bot_info_from_settings(settings),
        "guilds": [
            {**g, "iconUrl": guild_icon_url(g.get("id"), g.get("icon"), size=64)}
            for g in guilds
        ] if isinstance(guilds, list) else [],
    }

    await cache.set(session.id, payload)
    return payload
