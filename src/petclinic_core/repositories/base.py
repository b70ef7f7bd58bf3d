"""
Shared plumbing for the repository facades.
"""

import logging
from typing import Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import QueryError, StoreError
from ..models.base import BaseModel
from ..query import AggregateFetcher, NestedFetchSpec, Pageable
from ..utils.config import ClinicSettings

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)
RepositoryType = TypeVar("RepositoryType", bound="BaseRepository")


class BaseRepository:
    """
    Base class for repositories working on one async session.

    Repositories never commit; the caller owns the transaction, typically
    through ``SessionManager.get_transaction()``.

    Args:
        session: Session every statement runs on
        nested_fetch_strategy: Strategy used for nested collections,
            ``"correlated"`` or ``"batched"``
        default_page_size: Page size used when no pageable is given
    """

    def __init__(
        self,
        session: AsyncSession,
        nested_fetch_strategy: str = "correlated",
        default_page_size: int = 5,
    ) -> None:
        self.session = session
        self.nested_fetch_strategy = nested_fetch_strategy
        self.default_page_size = default_page_size

    @classmethod
    def from_settings(
        cls: Type[RepositoryType], session: AsyncSession, settings: ClinicSettings
    ) -> RepositoryType:
        return cls(
            session,
            nested_fetch_strategy=settings.nested_fetch_strategy,
            default_page_size=settings.default_page_size,
        )

    def fetcher(self, *specs: NestedFetchSpec) -> AggregateFetcher:
        return AggregateFetcher(specs, self.nested_fetch_strategy)

    def pageable(self, pageable: Optional[Pageable]) -> Pageable:
        return pageable if pageable is not None else Pageable.of_size(self.default_page_size)

    async def _get_existing(self, model: Type[ModelType], id: int) -> ModelType:
        try:
            instance = await self.session.get(model, id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load {model.__name__} {id}: {e}")
            raise StoreError(
                f"Failed to load {model.__name__} {id}",
                operation=f"get_{model.get_table_name()}",
                original_error=e,
            ) from e

        if instance is None:
            raise QueryError(
                f"{model.__name__} with id {id} does not exist",
                reason="unknown_id",
                column="id",
            )
        return instance

    async def _flush(self, instance: ModelType, operation: str) -> int:
        """Flush pending changes and return the id of ``instance``."""
        try:
            self.session.add(instance)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Database operation '{operation}' failed: {e}")
            raise StoreError(
                f"Database operation '{operation}' failed",
                operation=operation,
                original_error=e,
            ) from e

        logger.debug(f"{operation} stored {instance!r}")
        return instance.id
