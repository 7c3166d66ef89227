"""
Guild request/response schemas.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field


class GuildConfigResponse(BaseModel):
    """Guild configuration merged over defaults."""
    guildId: str = Field(..., description="Discord guild id")
    config: dict[str, Any] = Field(..., description="Bot configuration for the guild")


class GuildLogsResponse(BaseModel):
    """Recent messages of the guild's mod-log channel."""
    guildId: str
    channelId: str
    messages: list[dict[str, Any]]


class GuildDebugResponse(BaseModel):
    """Where a guild config document was found, per candidate collection."""
    guildId: str
    tried: list[str]
    found: list[dict[str, Any]]


class DatabaseCollectionsResponse(BaseModel):
    db: str
    collections: list[str]
