"""Core services."""

from .database.db_session import DbSessionService

__all__ = ["DbSessionService"]
