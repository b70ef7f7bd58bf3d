"""
Database connection and session management.

This module provides async SQLAlchemy engine configuration and session
management for the clinic data access layer.
"""

from .connection import (
    DatabaseConfig,
    close_engine,
    create_engine,
    create_engine_from_settings,
)
from .session import (
    SessionManager,
    get_session,
    get_session_manager,
    get_transaction,
    initialize_session_manager,
)

__all__ = [
    # Connection utilities
    "DatabaseConfig",
    "create_engine",
    "create_engine_from_settings",
    "close_engine",
    # Session management
    "SessionManager",
    "initialize_session_manager",
    "get_session_manager",
    "get_session",
    "get_transaction",
]
