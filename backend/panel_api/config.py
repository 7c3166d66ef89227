"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Deployment
    environment: str = "development"
    log_level: str = "INFO"
    panel_url: str = "http://localhost:5173"

    # Dev DB admin (generic collection editor)
    enable_dev_db_admin: str = ""
    dev_db_allowed_collections: str = ""
    bot_guild_config_collection: str = "guildconfigurations"

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "sparcky"
    mongodb_timeout_ms: int = 5000

    # Redis (/api/me cache)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    me_cache_ttl_ms: int = 15000

    # Session JWT
    jwt_secret: str = "CHANGE_ME_IN_PRODUCTION_USE_STRONG_SECRET"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7

    # Discord OAuth application
    discord_api_base: str = "https://discord.com/api"
    discord_client_id: str | None = None
    discord_client_secret: str | None = None
    discord_redirect_uri: str | None = None

    # Discord bot
    discord_bot_token: str | None = None
    discord_bot_id: str | None = None
    discord_bot_username: str = "Bot"
    discord_bot_avatar: str | None = None
    discord_bot_invite_permissions: str = "0"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
