"""
Visit repository.
"""

import logging
from typing import List

from ..exceptions import QueryError
from ..models import Visit
from ..query import fetch_rows
from ..schemas import VisitSchema
from .base import BaseRepository
from .owner import to_visit, visit_query, visits

logger = logging.getLogger(__name__)


class VisitRepository(BaseRepository):
    """Read and write access to visits."""

    async def save(self, visit: VisitSchema) -> int:
        """
        Record a visit for the pet referenced by ``visit.pet_id``.

        Returns:
            Identifier generated for the visit
        """
        if visit.pet_id is None:
            raise QueryError(
                "Visit does not reference a pet", reason="missing_pet", column="pet_id"
            )
        instance = Visit(
            pet_id=visit.pet_id,
            visit_date=visit.date,
            description=visit.description,
        )
        visit_id = await self._flush(instance, "insert_visit")
        logger.info(f"Saved visit {visit_id} for pet {visit.pet_id}")
        return visit_id

    async def find_by_pet_id(self, pet_id: int) -> List[VisitSchema]:
        """All visits of a pet, newest first."""
        rows = await fetch_rows(
            self.session,
            visit_query().where(visits.c.pet_id == pet_id),
            "find_visits_by_pet_id",
        )
        return [to_visit(row) for row in rows]
