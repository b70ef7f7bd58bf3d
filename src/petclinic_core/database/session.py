"""
Database session management utilities for the petclinic-core package.

This module provides the async session factory, session management, and
transaction utilities used by the repositories.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages database sessions and provides transaction utilities."""

    def __init__(
        self, engine: AsyncEngine, session_config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize session manager with database engine.

        Args:
            engine: SQLAlchemy async engine
            session_config: Optional session configuration overrides
        """
        self.engine = engine
        self._is_initialized = False

        default_config = {
            "expire_on_commit": False,
            "autoflush": True,
        }
        if session_config:
            default_config.update(session_config)

        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            autoflush=default_config["autoflush"],
            expire_on_commit=default_config["expire_on_commit"],
        )

    async def create_session(self) -> AsyncSession:
        """
        Create a new database session.

        Returns:
            New async database session
        """
        return self.session_factory()

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions with automatic cleanup.

        Yields:
            Database session

        Example:
            async with session_manager.get_session() as session:
                owners = OwnerRepository(session)
                page = await owners.find_by_last_name("Dav", Pageable.of_size(5))
        """
        session = await self.create_session()
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error(f"Session error, rolling back: {e}")
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def get_transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database transactions with automatic commit/rollback.

        Yields:
            Database session within a transaction
        """
        async with self.get_session() as session:
            async with session.begin():
                try:
                    yield session
                except Exception as e:
                    logger.error(f"Transaction error, rolling back: {e}")
                    raise

    async def initialize_database(self, metadata: Optional[MetaData] = None) -> None:
        """
        Create the schema described by ``metadata``.

        Args:
            metadata: SQLAlchemy metadata object containing table definitions
        """
        logger.info("Starting database initialization...")
        if metadata is not None:
            async with self.engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
            logger.info("Database tables created successfully")
        self._is_initialized = True

    async def close_all_sessions(self) -> None:
        """Close all active sessions and dispose of the engine."""
        await self.engine.dispose()
        logger.info("All database sessions and connections closed")

    @property
    def is_initialized(self) -> bool:
        """Check if the database has been initialized."""
        return self._is_initialized


# Global session manager instance (will be initialized by application)
_session_manager: Optional[SessionManager] = None


def initialize_session_manager(engine: AsyncEngine) -> SessionManager:
    """
    Initialize the global session manager.

    Args:
        engine: SQLAlchemy async engine

    Returns:
        Initialized session manager
    """
    global _session_manager
    _session_manager = SessionManager(engine)
    logger.info("Session manager initialized")
    return _session_manager


def get_session_manager() -> SessionManager:
    """
    Get the global session manager instance.

    Raises:
        RuntimeError: If session manager is not initialized
    """
    if _session_manager is None:
        raise RuntimeError(
            "Session manager not initialized. Call initialize_session_manager() first."
        )
    return _session_manager


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session from the global session manager."""
    manager = get_session_manager()
    async with manager.get_session() as session:
        yield session


@asynccontextmanager
async def get_transaction() -> AsyncGenerator[AsyncSession, None]:
    """Get a database transaction from the global session manager."""
    manager = get_session_manager()
    async with manager.get_transaction() as session:
        yield session
