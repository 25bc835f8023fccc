"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.product_api.api.http.app_data import ApplicationDependencies
from src.product_api.api.http.deps import get_app_dependencies

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe; answers as long as the process is running."""
    return {"status": "healthy", "service": "product-api"}


@router.get("/ready", response_model=None)
def readiness(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> dict[str, Any] | JSONResponse:
    """Readiness probe.

    Returns 200 when the database answers, 503 while the service runs
    degraded without one.
    """
    db_healthy = app_deps.database_service.health_check()
    app_deps.database_ready = db_healthy

    body = {
        "status": "ready" if db_healthy else "degraded",
        "checks": {
            "database": {
                "status": "healthy" if db_healthy else "unhealthy",
                "type": app_deps.database_service.engine.dialect.name,
            }
        },
    }
    if not db_healthy:
        return JSONResponse(status_code=503, content=body)
    return body
