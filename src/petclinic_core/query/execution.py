"""
Statement execution shared by the pagination and nested fetch paths.
"""

import logging
from typing import Any, List, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from ..exceptions import StoreError

logger = logging.getLogger(__name__)


async def fetch_rows(
    session: AsyncSession, statement: Executable, operation: str
) -> List[Mapping[str, Any]]:
    """
    Execute a read statement and return every row as a mapping.

    Args:
        session: Session to execute on
        statement: Statement to execute
        operation: Name of the operation, used in logs and errors

    Returns:
        All result rows, in result order

    Raises:
        StoreError: If the store rejects or fails the statement
    """
    try:
        result = await session.execute(statement)
        rows = list(result.mappings().all())
    except SQLAlchemyError as e:
        logger.error(f"Database operation '{operation}' failed: {e}")
        raise StoreError(
            f"Database operation '{operation}' failed",
            operation=operation,
            original_error=e,
        ) from e

    logger.debug(f"{operation} returned {len(rows)} rows")
    return rows


async def fetch_scalar(
    session: AsyncSession, statement: Executable, operation: str
) -> Any:
    """
    Execute a statement returning a single value.

    Raises:
        StoreError: If the store rejects or fails the statement
    """
    try:
        result = await session.execute(statement)
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database operation '{operation}' failed: {e}")
        raise StoreError(
            f"Database operation '{operation}' failed",
            operation=operation,
            original_error=e,
        ) from e
