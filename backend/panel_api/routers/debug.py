"""
Debug router: database introspection for operators.

Returns no secrets, only collection names and guild config documents.
Available only when the dev DB admin is enabled.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from panel_api.admin.guard import COLLECTION_NAME_PATTERN, AdminGuard
from panel_api.config import Settings, get_settings
from panel_api.core.exceptions import BadRequest
from panel_api.database.collections import Collections
from panel_api.database.connections import get_database
from panel_api.dependencies.auth import CurrentSession
from panel_api.dependencies.services import get_admin_guard
from panel_api.schemas.guild import DatabaseCollectionsResponse, GuildDebugResponse
from panel_api.utils.encoding import to_jsonable

router = APIRouter(prefix="/api/debug", tags=["Debug"])


@router.get(
    "/mongo/collections",
    response_model=DatabaseCollectionsResponse,
    summary="List database collections",
)
async def list_database_collections(
    session: CurrentSession,
    guard: AdminGuard = Depends(get_admin_guard),
):
    """Every collection of the panel database, sorted."""
    guard.assert_admin_mode_enabled()

    db = await get_database()
    names = await db.list_collection_names()

    return {"db": db.name, "collections": sorted(names)}


@router.get(
    "/mongo/guild-config/{guild_id}",
    response_model=GuildDebugResponse,
    summary="Find a guild config document",
)
async def find_guild_config(
    guild_id: str,
    session: CurrentSession,
    collection: Optional[str] = Query(None, description="Extra collection name to try first"),
    settings: Settings = Depends(get_settings),
    guard: AdminGuard = Depends(get_admin_guard),
):
    """
    Look for the guild's config document under the collection names the bot
    has used, to diagnose a misconfigured BOT_GUILD_CONFIG_COLLECTION.

    The `collection` parameter bypasses the dev DB allowlist on purpose: any
    name matching the collection pattern is read. Only admin mode guards it,
    and only `{"guildId": guild_id}` lookups are made.
    """
    guard.assert_admin_mode_enabled()

    names: list[str] = []
    for name in [collection, settings.bot_guild_config_collection, *Collections.GUILD_CONFIG_CANDIDATES]:
        name = (name or "").strip()
        if name and name not in names:
            names.append(name)

    for name in names:
        if not COLLECTION_NAME_PATTERN.match(name):
            raise BadRequest("Invalid collection name")

    db = await get_database()
    found = []
    for name in names:
        doc = await db[name].find_one({"guildId": guild_id})
        if doc:
            found.append({"collection": name, "doc": doc})

    return to_jsonable({"guildId": guild_id, "tried": names, "found": found})
