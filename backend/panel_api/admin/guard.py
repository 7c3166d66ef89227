"""
Configuration guard for the dev DB admin.

Decides whether the generic collection editor is available at all and which
collections it may touch. Production deployments are locked out unless the
enable flag is set explicitly, and a missing allowlist falls back to a small
fixed set rather than to every collection in the database.
"""
import re

from panel_api.config import Settings
from panel_api.core.exceptions import BadRequest, Forbidden
from panel_api.database.collections import Collections

AFFIRMATIVE_FLAGS = {"1", "true", "yes", "on"}
COLLECTION_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9._-]{1,120}$")


class AdminGuard:
    """Admin-mode and allowlist checks, re-derived from settings on every call."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def is_admin_mode_enabled(self) -> bool:
        flag = (self.settings.enable_dev_db_admin or "").strip().lower()
        if flag in AFFIRMATIVE_FLAGS:
            return True
        return not self.settings.is_production

    def assert_admin_mode_enabled(self) -> None:
        if not self.is_admin_mode_enabled():
            raise Forbidden("Dev DB admin is disabled")

    def _parse_allowlist(self) -> list[str]:
        raw = (self.settings.dev_db_allowed_collections or "").strip()
        if not raw:
            return []
        return [name.strip() for name in raw.split(",") if name.strip()]

    def fallback_collections(self) -> list[str]:
        """Minimal default set used when no allowlist is configured."""
        names = [self.settings.bot_guild_config_collection or Collections.GUILD_CONFIGURATIONS]
        names.extend(Collections.FALLBACK_ADMIN)
        return sorted(set(names))

    def resolve_allowed_collections(self) -> list[str]:
        """
        Resolve the collection allowlist.

        Returns:
            Sorted, deduplicated collection names from
            DEV_DB_ALLOWED_COLLECTIONS, or the fallback set when it is unset
        """
        allowed = self._parse_allowlist()
        if allowed:
            return sorted(set(allowed))
        return self.fallback_collections()

    def assert_collection_allowed(self, collection: str | None) -> str:
        """
        Validate a caller-supplied collection name.

        Raises:
            Forbidden: If admin mode is disabled or the name is not allowlisted
            BadRequest: If the name is missing or malformed

        Returns:
            The trimmed collection name
        """
        self.assert_admin_mode_enabled()

        name = (collection or "").strip()
        if not name:
            raise BadRequest("Missing collection")

        if not COLLECTION_NAME_PATTERN.match(name):
            raise BadRequest("Invalid collection name")

        allowed = self.resolve_allowed_collections()
        if name not in allowed:
            raise Forbidden("Collection not allowed", meta={"allowed": allowed})

        return name
