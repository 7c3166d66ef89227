"""
Authentication router: Discord OAuth2 login.
"""
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from panel_api.config import Settings, get_settings
from panel_api.core.security import create_session_token
from panel_api.services.discord_api import DiscordAPI, DiscordAPIError, get_discord_api

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get(
    "/discord",
    summary="Start Discord login",
)
async def discord_login(discord: DiscordAPI = Depends(get_discord_api)):
    """Redirect to Discord's consent screen (`identify guilds` scopes)."""
    return RedirectResponse(discord.build_authorize_url(), status_code=status.HTTP_302_FOUND)


@router.get(
    "/discord/callback",
    summary="Discord OAuth callback",
)
async def discord_callback(
    code: Optional[str] = Query(None, description="Authorization code from Discord"),
    settings: Settings = Depends(get_settings),
    discord: DiscordAPI = Depends(get_discord_api),
):
    """
    Exchange the authorization code, sign a session token and send the browser
    back to the panel's login page with `?token=...`.
    """
    if not code:
        return PlainTextResponse("Missing code", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        token_data = await discord.exchange_code(code)
        access_token = token_data["access_token"]
        user = await discord.get_current_user(access_token)
    except (DiscordAPIError, KeyError, TypeError) as e:
        logger.error("Discord OAuth callback failed: %s", e)
        return PlainTextResponse("OAuth error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    session_token = create_session_token(user, access_token)
    login_url = f"{settings.panel_url.rstrip('/')}/login?{urlencode({'token': session_token})}"

    return RedirectResponse(login_url, status_code=status.HTTP_302_FOUND)
