"""
Discord REST API client.

Covers the handful of endpoints the panel needs:
- OAuth2: authorize URL and code exchange
- Users: current user and the guilds they belong to (user bearer token)
- Guilds, channels and messages (bot token)
"""
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from panel_api.config import get_settings
from panel_api.utils.discord import DISCORD_AUTHORIZE_URL

OAUTH_SCOPES = "identify guilds"


class DiscordAPIError(Exception):
    """
    A Discord call failed.

    `status_code` is None when Discord could not be reached at all.
    """

    def __init__(self, status_code: Optional[int], data: Any = None):
        self.status_code = status_code
        self.data = data
        super().__init__(f"Discord API error {status_code}: {data}")

    @property
    def retry_after(self) -> Optional[float]:
        """`retry_after` seconds from a 429 body, if present."""
        if isinstance(self.data, dict):
            value = self.data.get("retry_after")
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return value
        return None


class DiscordAPI:
    """
    Async client for the Discord REST API.
    """

    def __init__(self):
        """Initialize Discord API client."""
        self.settings = get_settings()
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.settings.discord_api_base,
                timeout=15.0,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _auth_headers(token: str, bot: bool = False) -> dict[str, str]:
        scheme = "Bot" if bot else "Bearer"
        return {"Authorization": f"{scheme} {token}"}

    @staticmethod
    def _json_or_raise(response: httpx.Response) -> Any:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                data = response.json()
            except ValueError:
                data = response.text
            raise DiscordAPIError(response.status_code, data) from e
        return response.json()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        client = await self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise DiscordAPIError(None, str(e)) from e
        return self._json_or_raise(response)

    # ==================== OAuth2 ====================

    def build_authorize_url(self) -> str:
        """URL of Discord's consent screen for the panel application."""
        params = {
            "client_id": self.settings.discord_client_id or "",
            "redirect_uri": self.settings.discord_redirect_uri or "",
            "response_type": "code",
            "scope": OAUTH_SCOPES,
        }
        return f"{DISCORD_AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> dict[str, Any]:
        """
        Exchange an authorization code for a user access token.

        Returns:
            Token response (`access_token`, `token_type`, `expires_in`, ...)
        """
        return await self._request(
            "POST",
            "/oauth2/token",
            data={
                "client_id": self.settings.discord_client_id or "",
                "client_secret": self.settings.discord_client_secret or "",
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.settings.discord_redirect_uri or "",
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

    # ==================== Users ====================

    async def get_current_user(self, token: str, bot: bool = False) -> dict[str, Any]:
        """`/users/@me` for a user access token or, with `bot=True`, the bot token."""
        return await self._request("GET", "/users/@me", headers=self._auth_headers(token, bot))

    async def get_current_user_guilds(self, token: str) -> list[dict[str, Any]]:
        return await self._request("GET", "/users/@me/guilds", headers=self._auth_headers(token))

    # ==================== Guilds (bot) ====================

    async def get_guild(self, guild_id: str, bot_token: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"/guilds/{guild_id}", headers=self._auth_headers(bot_token, bot=True)
        )

    async def get_guild_channels(self, guild_id: str, bot_token: str) -> list[dict[str, Any]]:
        return await self._request(
            "GET", f"/guilds/{guild_id}/channels", headers=self._auth_headers(bot_token, bot=True)
        )

    async def get_channel_messages(
        self,
        channel_id: str,
        bot_token: str,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """
        Most recent messages of a channel.

        Args:
            channel_id: Channel to read
            bot_token: Bot token with read access to the channel
            limit: Number of messages (Discord accepts 1-100)
        """
        return await self._request(
            "GET",
            f"/channels/{channel_id}/messages",
            headers=self._auth_headers(bot_token, bot=True),
            params={"limit": limit},
        )


# Singleton instance for shared use
_discord_api: Optional[DiscordAPI] = None


async def get_discord_api() -> DiscordAPI:
    """Get shared DiscordAPI instance."""
    global _discord_api
    if _discord_api is None:
        _discord_api = DiscordAPI()
    return _discord_api


async def close_discord_api() -> None:
    global _discord_api
    if _discord_api is not None:
        await _discord_api.close()
        _discord_api = None
