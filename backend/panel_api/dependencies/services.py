"""
Service providers for dependency injection in routes.
"""
from fastapi import Depends

from panel_api.admin.guard import AdminGuard
from panel_api.config import Settings, get_settings
from panel_api.database.connections import get_database, get_redis_client
from panel_api.services.document_service import DocumentService
from panel_api.services.guild_config_service import GuildConfigService
from panel_api.services.me_cache import MeCache


def get_admin_guard(settings: Settings = Depends(get_settings)) -> AdminGuard:
    return AdminGuard(settings)


async def get_document_service(
    guard: AdminGuard = Depends(get_admin_guard),
) -> DocumentService:
    """Dependency to get DocumentService instance."""
    db = await get_database()
    return DocumentService(db, guard)


async def get_guild_config_service(
    settings: Settings = Depends(get_settings),
) -> GuildConfigService:
    """Dependency to get GuildConfigService instance."""
    db = await get_database()
    return GuildConfigService(db, settings.bot_guild_config_collection)


async def get_me_cache(settings: Settings = Depends(get_settings)) -> MeCache:
    redis = await get_redis_client()
    return MeCache(redis, settings.me_cache_ttl_ms)
