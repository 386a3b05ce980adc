"""
Health check router for liveness and readiness probes.
"""
import asyncio

from fastapi import APIRouter, status
from ldap3 import Server

from app.config import get_settings
from app.database.connections import get_mongo_client, get_redis_client

router = APIRouter(tags=["Health"])


def ldap_reachable(url: str, timeout: int) -> bool:
    return bool(Server(url, connect_timeout=timeout).check_availability())


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check():
    """Returns 200 if the API is running."""
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check with dependencies",
)
async def readiness_check():
    """
    Readiness check covering the credential stores.

    MongoDB and Redis are always checked. The LDAP directory is only
    checked when LDAP authentication is enabled.
    """
    settings = get_settings()
    checks = {
        "api": "healthy",
        "mongodb": "unknown",
        "redis": "unknown",
    }

    try:
        client = await get_mongo_client()
        await client.admin.command("ping")
        checks["mongodb"] = "healthy"
    except Exception as e:
        checks["mongodb"] = f"unhealthy: {str(e)}"

    try:
        redis = await get_redis_client()
        await redis.ping()
        checks["redis"] = "healthy"
    except Exception as e:
        checks["redis"] = f"unhealthy: {str(e)}"

    if settings.auth_use_ldap:
        try:
            reachable = await asyncio.to_thread(
                ldap_reachable, settings.ldap_url, settings.ldap_timeout_seconds
            )
            checks["ldap"] = "healthy" if reachable else "unhealthy: unreachable"
        except Exception as e:
            checks["ldap"] = f"unhealthy: {str(e)}"

    all_healthy = all(v == "healthy" for v in checks.values())

    return {
        "status": "healthy" if all_healthy else "degraded",
        "auth_backend": "ldap" if settings.auth_use_ldap else "local",
        "checks": checks,
    }
