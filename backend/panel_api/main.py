"""
Discord Panel Backend - FastAPI Application

REST API behind the web panel of a Discord moderation bot.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from panel_api.config import get_settings
from panel_api.core.exceptions import register_exception_handlers
from panel_api.database.collections import create_indexes
from panel_api.database.connections import close_connections, get_database
from panel_api.routers import auth, debug, dev_db, guilds, health, logs, me
from panel_api.services.discord_api import close_discord_api

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Configure logging
    - Create the guild config index

    Shutdown:
    - Close MongoDB, Redis and Discord clients
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)

    logger.info("Starting up Discord Panel API (%s)...", settings.environment)

    try:
        db = await get_database()
        await create_indexes(db, settings.bot_guild_config_collection)
        logger.info("Indexes ensured on %s.%s", settings.mongodb_db, settings.bot_guild_config_collection)
    except Exception as e:
        logger.warning("Database initialization warning: %s", e)

    yield

    logger.info("Shutting down Discord Panel API...")
    await close_connections()
    await close_discord_api()
    logger.info("Connections closed")


app = FastAPI(
    title="Discord Panel API",
    description="""
## Discord Server Management Panel API

Backend of the web panel for a Discord moderation bot.

### Features
- **Authentication**: Discord OAuth2 login, signed session token
- **Guilds**: Guild details, channels and bot membership
- **Configuration**: Per-guild bot configuration
- **Logs**: Messages of the guild's mod-log channel
- **Dev DB**: Allowlisted document editor for operators (opt-in)

### Authentication
Protected endpoints expect the session token from the login redirect:
```
Authorization: Bearer <token>
```

Start the login flow at `GET /auth/discord`.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.panel_url.rstrip("/")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(me.router)
app.include_router(guilds.router)
app.include_router(logs.router)
app.include_router(debug.router)
app.include_router(dev_db.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Discord Panel API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
