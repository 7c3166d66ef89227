"""
Dependencies for dependency injection in routes.
"""
from panel_api.dependencies.auth import get_current_session, CurrentSession
from panel_api.dependencies.services import (
    get_admin_guard,
    get_document_service,
    get_guild_config_service,
    get_me_cache,
)

__all__ = [
    "get_current_session",
    "CurrentSession",
    "get_admin_guard",
    "get_document_service",
    "get_guild_config_service",
    "get_me_cache",
]
