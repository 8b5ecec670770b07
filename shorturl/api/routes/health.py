"""Health check endpoints for monitoring service status."""

import time

from fastapi import APIRouter, Depends, Request, status
from loguru import logger

from shorturl.core.config import settings
from shorturl.db.base import Database, DatabaseHealthCheck
from shorturl.db.session import get_database
from shorturl.repositories.url_repository import URLRepository
from shorturl.services.cleanup import CleanupService
from shorturl.services.exceptions import ExpiredURLCleanupError

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Get system health status",
    response_description="Health status of all system components"
)
async def health_check(request: Request, database: Database = Depends(get_database)):
    """Check health of the store and, when the sweep is on, how many mappings await it."""
    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "timestamp": time.time(),
        "components": {}
    }

    db_health = await DatabaseHealthCheck.check_connection(database)
    health_status["components"]["database"] = db_health
    if db_health["status"] != "healthy":
        health_status["status"] = "degraded"

    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        health_status["components"]["scheduler"] = {"running": False}
    else:
        scheduler_status = scheduler.get_status()
        try:
            async with database.session() as session:
                scheduler_status["cleanup"] = await CleanupService(URLRepository()).get_cleanup_stats(session)
        except ExpiredURLCleanupError as e:
            logger.warning(f"Cleanup stats unavailable: {e}")
            scheduler_status["cleanup"] = None
            health_status["status"] = "degraded"
        health_status["components"]["scheduler"] = scheduler_status

    return health_status


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    response_description="Service liveness status"
)
async def liveness_probe():
    """Simple check that the service is running."""
    return {"alive": True}
