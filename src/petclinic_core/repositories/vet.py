"""
Vet repository.

Specialties are attached to every vet as a nested collection, so listing
vets never issues one query per vet.
"""

from typing import Any, List, Mapping, Optional

from sqlalchemy import Select, select

from ..models import Specialty, Vet, vet_specialties
from ..query import NestedFetchSpec, Pageable, fetch_page
from ..schemas import Page, SpecialtySchema, VetSchema
from .base import BaseRepository

vets = Vet.__table__
specialties = Specialty.__table__


def vet_query() -> Select:
    return select(vets.c.id, vets.c.first_name, vets.c.last_name)


VET_SPECIALTIES = NestedFetchSpec(
    name="specialties",
    query=select(specialties.c.id, specialties.c.name)
    .select_from(
        vet_specialties.join(
            specialties, vet_specialties.c.specialty_id == specialties.c.id
        )
    )
    .order_by(specialties.c.name),
    child_key=vet_specialties.c.vet_id,
    parent_key=vets.c.id,
)


def to_vet(row: Mapping[str, Any]) -> VetSchema:
    return VetSchema(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        specialties=[
            SpecialtySchema(id=specialty["id"], name=specialty["name"])
            for specialty in row.get("specialties", [])
        ],
    )


class VetRepository(BaseRepository):
    """Read access to vets and their specialties."""

    async def find_all(self) -> List[VetSchema]:
        """All vets ordered by id, each with their specialties."""
        rows = await self.fetcher(VET_SPECIALTIES).fetch(
            self.session, vet_query().order_by(vets.c.id)
        )
        return [to_vet(row) for row in rows]

    async def find_all_paged(
        self, pageable: Optional[Pageable] = None
    ) -> Page[VetSchema]:
        """One page of vets ordered by id, each with their specialties."""
        return await fetch_page(
            self.session,
            vet_query(),
            [vets.c.id],
            self.pageable(pageable),
            to_vet,
            fetcher=self.fetcher(VET_SPECIALTIES),
        )
