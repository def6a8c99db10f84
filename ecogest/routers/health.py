"""Health check endpoints."""
import logging

from fastapi import APIRouter

from ..core.cache import cache_manager
from ..core.config import settings
from ..core.database import health_check_db, background_engine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "service": "EcoGest API",
        "version": settings.app_version,
        "environment": settings.environment,
    }


@router.get("/db-health")
async def database_health():
    api_ok = await health_check_db()
    background_ok = await health_check_db(background_engine)
    return {
        "status": "healthy" if api_ok and background_ok else "unhealthy",
        "api_pool": api_ok,
        "background_pool": background_ok,
    }


@router.get("/cache-health")
async def cache_health():
    """Redis cache health check"""
    if not cache_manager.enabled:
        return {"status": "disabled"}
    ok = await cache_manager.set("health:ping", "pong", ttl=10)
    return {"status": "healthy" if ok else "unhealthy"}
