"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from src.product_api import __version__
from src.product_api.api.http.app_data import ApplicationDependencies
from src.product_api.api.http.middleware.origin import OriginAllowListMiddleware
from src.product_api.api.http.routers.health import router as health_router
from src.product_api.api.http.routers.product import router as product_router
from src.product_api.api.http.validation import (
    RequestValidationFailed,
    validation_failed_handler,
)
from src.product_api.api.utils.app_startup import configure_logging
from src.product_api.core.services import DbSessionService
from src.product_api.runtime.context import get_config

API_DESCRIPTION = "REST API for managing products: name, price and availability."


def connect_db(app_deps: ApplicationDependencies) -> None:
    """Verify the database and create missing tables.

    A failure aborts startup when ``database.fail_fast`` is set or the app
    runs in production. Otherwise the service keeps running degraded and
    ``/health/ready`` reports 503 until the database comes back.
    """
    config = get_config()
    try:
        app_deps.database_service.create_all()
    except SQLAlchemyError:
        app_deps.database_ready = False
        logger.exception("Failed to connect to the database")
        if config.database.fail_fast or config.app.environment == "production":
            raise
        logger.warning("Continuing without a working database connection")
        return

    app_deps.database_ready = True
    logger.info("Database connection established")


# --- Lifecycle hooks ---
async def startup(app: FastAPI) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    if app.state.app_dependencies is None:
        app.state.app_dependencies = ApplicationDependencies(
            database_service=DbSessionService()
        )
    connect_db(app.state.app_dependencies)


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = app.state.app_dependencies
    if app_dependencies is not None:
        app_dependencies.database_service.dispose()


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Build the application.

    Args:
        dependencies: Pre-built dependency container. When omitted, one is
            created from the current configuration during startup.
    """
    config = get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(app)
        try:
            yield
        finally:
            await shutdown(app)

    docs_enabled = config.app.docs_enabled
    app = FastAPI(
        title="Product API",
        version=__version__,
        description=API_DESCRIPTION,
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.app_dependencies = dependencies

    # --- CORS configuration ---
    cors = config.app.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )
    app.add_middleware(OriginAllowListMiddleware, origins=cors.origins)

    # --- Request logging middleware ---
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        xff = request.headers.get("x-forwarded-for")
        client_ip = (
            xff.split(",")[0].strip()
            if xff
            else request.client.host
            if request.client
            else "unknown"
        )

        base_ctx = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": client_ip,
            "user_agent": request.headers.get("user-agent", "unknown"),
        }

        start = time.perf_counter()

        # Everything that logs within this block inherits base_ctx
        with logger.contextualize(**base_ctx):
            try:
                logger.info("request.start")
                response = await call_next(request)

                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 1),
                ).info("request.end")

                response.headers.setdefault("X-Request-ID", request_id)
                return response

            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500,
                    duration_ms=round(duration_ms, 1),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                return JSONResponse(
                    status_code=500,
                    content={"detail": "Internal Server Error", "request_id": request_id},
                    headers={"X-Request-ID": request_id},
                )

    app.add_exception_handler(RequestValidationFailed, validation_failed_handler)

    # --- Router registration ---
    app.include_router(product_router, prefix="/api/products")
    app.include_router(health_router)

    return app


configure_logging()
app = create_app()

__all__ = ["app", "create_app", "connect_db", "startup", "shutdown"]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # Request logging middleware handles access logs
    )
