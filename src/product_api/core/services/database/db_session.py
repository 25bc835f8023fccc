"""Database engine and session factory used across the application."""

from typing import Any

from loguru import logger
from sqlalchemy import Engine, text
from sqlmodel import Session, SQLModel, create_engine

from src.product_api.runtime.config.config_data import ConfigData
from src.product_api.runtime.context import get_config


class DbSessionService:
    def __init__(self, engine: Engine | None = None):
        """Initialize the shared database engine and session factory.

        Args:
            engine: Pre-built engine to use instead of one derived from the
                current configuration (tests pass an in-memory SQLite engine).
        """
        if engine is not None:
            self._engine = engine
            return

        main_config = get_config()
        db_config = main_config.database
        logger.info(
            "Configuring database engine for environment: {}",
            main_config.app.environment,
        )

        engine_kwargs: dict[str, Any] = {
            "echo": db_config.echo,
            "connect_args": self._get_connect_args(main_config),
        }
        if not db_config.is_sqlite:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                    "pool_pre_ping": True,  # Validate connections before use
                }
            )

        self._engine = create_engine(db_config.connection_string, **engine_kwargs)
        logger.info("Database engine initialized for {}", self._engine.url)

    @property
    def engine(self) -> Engine:
        return self._engine

    def _get_connect_args(self, config: ConfigData) -> dict:
        """Get database-specific connection arguments."""
        connect_args: dict[str, Any] = {}

        if config.database.is_sqlite:
            connect_args.update(
                {
                    "check_same_thread": False,  # Sessions cross the threadpool
                    "timeout": 20,  # Lock timeout
                }
            )
            if config.app.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )
        elif config.database.url.startswith("postgresql"):
            connect_args.update(
                {
                    "application_name": f"{config.app.environment}_product_api",
                    "connect_timeout": 30,
                }
            )

        return connect_args

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(self._engine, expire_on_commit=False)

    def create_all(self) -> None:
        """Create all database tables."""
        from src.product_api.entities.product import ProductTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error("Database health check failed: {}: {}", type(e).__name__, e)
            return False

    def dispose(self) -> None:
        """Close every pooled connection."""
        self._engine.dispose()
