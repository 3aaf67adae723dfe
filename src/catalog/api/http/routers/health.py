"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health() -> dict[str, str]:
    """Liveness probe; does not check dependencies."""
    return {"status": "healthy", "service": "catalog-api"}


@router.get("/ready", response_model=None)
def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness check for the catalog store and the search mirror.

    Returns 503 only when the catalog store is down. The search mirror is
    non-critical: searches fall back to the store while it is unavailable.
    """
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = get_config()

    checks: dict[str, Any] = {}
    all_healthy = True

    db_healthy = app_deps.database_service.health_check()
    checks["database"] = {
        "status": "healthy" if db_healthy else "unhealthy",
        "type": "sqlite" if config.database.is_sqlite else "postgresql",
    }
    if not db_healthy:
        all_healthy = False

    search_service = app_deps.search_service
    if not search_service.enabled:
        checks["search"] = {
            "status": "disabled",
            "note": "Search mirror is not enabled, searches use the catalog store",
        }
    elif not search_service.available:
        checks["search"] = {
            "status": "degraded",
            "index": search_service.index_name,
            "note": "Search mirror marked unavailable, searches use the catalog store",
        }
    else:
        search_healthy = search_service.health_check()
        checks["search"] = {
            "status": "healthy" if search_healthy else "degraded",
            "index": search_service.index_name,
        }

    if app_deps.sync_failure_log is not None and db_healthy:
        try:
            checks["search"]["pending_syncs"] = app_deps.sync_failure_log.count_pending()
        except SQLAlchemyError as e:
            logger.error("Cannot read pending search syncs: {}", e)
            checks["search"]["pending_syncs"] = "unknown"

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": checks,
    }

    if not all_healthy:
        return JSONResponse(status_code=503, content=response)

    return response
