"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Request
from sqlmodel import Session

from src.product_api.api.http.app_data import ApplicationDependencies


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the application-wide dependency container."""
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session scoped to the current request."""
    session = get_app_dependencies(request).database_service.get_session()
    try:
        yield session
    finally:
        # Anything the handler did not commit is rolled back here
        session.close()
