"""
Liveness and readiness probes.

`/ping` and `/health` only prove the process answers. `/health/ready` also
pings MongoDB and the Redis cache; it always answers 200 and reports
`degraded` with the failing dependency instead of failing the request.
"""
import logging

from fastapi import APIRouter, status

from panel_api.database.connections import get_mongo_client, get_redis_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


async def _ping_mongodb() -> None:
    client = await get_mongo_client()
    await client.admin.command("ping")


async def _ping_redis() -> None:
    redis = await get_redis_client()
    await redis.ping()


READINESS_CHECKS = {
    "mongodb": _ping_mongodb,
    "redis": _ping_redis,
}


@router.get("/ping", status_code=status.HTTP_200_OK, summary="Ping")
async def ping():
    return {"ok": True}


@router.get("/health", status_code=status.HTTP_200_OK, summary="Liveness check")
async def health_check():
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check with dependencies",
)
async def readiness_check():
    """
    Ping every dependency and report each one as `healthy` or
    `unhealthy: <reason>`.
    """
    checks = {"api": "healthy"}

    for name, check in READINESS_CHECKS.items():
        try:
            await check()
        except Exception as e:
            logger.warning("Readiness check %s failed: %s", name, e)
            checks[name] = f"unhealthy: {e}"
        else:
            checks[name] = "healthy"

    all_healthy = all(v == "healthy" for v in checks.values())

    return {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
    }
