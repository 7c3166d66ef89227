"""
Request and response schemas for API endpoints.
"""
from panel_api.schemas.dev_db import (
    CollectionsResponse,
    DocumentListResponse,
    DocumentResponse,
    DeleteResponse,
)
from panel_api.schemas.guild import (
    GuildConfigResponse,
    GuildLogsResponse,
    GuildDebugResponse,
    DatabaseCollectionsResponse,
)

__all__ = [
    # Dev DB
    "CollectionsResponse",
    "DocumentListResponse",
    "DocumentResponse",
    "DeleteResponse",
    # Guild
    "GuildConfigResponse",
    "GuildLogsResponse",
    "GuildDebugResponse",
    "DatabaseCollectionsResponse",
]
