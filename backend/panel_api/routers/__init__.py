"""
API Routers module.
"""
from panel_api.routers import auth, debug, dev_db, guilds, health, logs, me

__all__ = ["auth", "debug", "dev_db", "guilds", "health", "logs", "me"]
