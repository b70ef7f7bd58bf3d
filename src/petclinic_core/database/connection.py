"""
Database connection utilities for the petclinic-core package.

This module provides async SQLAlchemy engine configuration for the
PostgreSQL (asyncpg) and SQLite (aiosqlite) backends.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from ..utils.config import ClinicSettings, ConfigError, DatabaseURLValidator

logger = logging.getLogger(__name__)


class DatabaseConfig:
    """Configuration class for database connections."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        echo: bool = False,
    ):
        """
        Initialize database configuration.

        Args:
            database_url: PostgreSQL or SQLite connection URL
            pool_size: Number of connections to maintain in the pool
            max_overflow: Maximum number of connections that can overflow the pool
            pool_timeout: Timeout for getting connection from pool
            pool_recycle: Time in seconds to recycle connections
            echo: Whether to echo SQL statements

        Raises:
            ValueError: If the URL is invalid
        """
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.echo = echo

        try:
            self.backend = DatabaseURLValidator.validate_url(database_url)["backend"]
        except ConfigError as e:
            raise ValueError(f"Invalid database URL: {e}")

    def get_async_url(self) -> str:
        """Convert database URL to async driver format if needed."""
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace(
                "postgresql://", "postgresql+asyncpg://", 1
            )
        if self.database_url.startswith("sqlite://"):
            return self.database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return self.database_url


def create_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_timeout: int = 30,
    pool_recycle: int = 3600,
    pool_pre_ping: bool = True,
    echo: bool = False,
    use_null_pool: bool = False,
    connect_args: Optional[dict] = None,
) -> AsyncEngine:
    """
    Create an async SQLAlchemy engine with proper configuration.

    SQLite URLs always get a NullPool; the aiosqlite driver opens one
    thread per connection and pooling buys nothing there.

    Args:
        database_url: PostgreSQL or SQLite connection URL
        pool_size: Number of connections to maintain in the pool
        max_overflow: Maximum number of connections that can overflow the pool
        pool_timeout: Timeout for getting connection from pool
        pool_recycle: Time in seconds to recycle connections
        pool_pre_ping: Whether to validate connections before use
        echo: Whether to echo SQL statements
        use_null_pool: Whether to use NullPool (useful for testing)
        connect_args: Additional connection arguments

    Returns:
        Configured async SQLAlchemy engine

    Raises:
        ValueError: If database URL is invalid
    """
    config = DatabaseConfig(
        database_url=database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
        echo=echo,
    )

    async_url = config.get_async_url()

    engine_kwargs: Dict[str, Any] = {"echo": config.echo}

    if connect_args:
        engine_kwargs["connect_args"] = connect_args

    if use_null_pool or config.backend == "sqlite":
        engine_kwargs["poolclass"] = NullPool
    else:
        engine_kwargs.update(
            {
                "poolclass": AsyncAdaptedQueuePool,
                "pool_size": config.pool_size,
                "max_overflow": config.max_overflow,
                "pool_timeout": config.pool_timeout,
                "pool_recycle": config.pool_recycle,
                "pool_pre_ping": pool_pre_ping,
            }
        )

    try:
        engine = create_async_engine(async_url, **engine_kwargs)
        logger.info(
            f"Created async {config.backend} engine for "
            f"{urlparse(async_url).hostname or urlparse(async_url).path}"
        )
        return engine
    except Exception as e:
        logger.error(f"Failed to create database engine: {e}")
        raise


async def close_engine(engine: AsyncEngine) -> None:
    """
    Properly close the database engine and all connections.

    Args:
        engine: SQLAlchemy async engine to close
    """
    await engine.dispose()
    logger.info("Database engine closed successfully")


def create_engine_from_settings(settings: ClinicSettings, **kwargs: Any) -> AsyncEngine:
    """
    Create the engine described by ``settings``.

    SQL echo follows ``settings.echo_sql``; ``kwargs`` go to ``create_engine``.
    """
    return create_engine(settings.database_url, echo=settings.echo_sql, **kwargs)
