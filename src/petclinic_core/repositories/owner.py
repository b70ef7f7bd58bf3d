"""
Owner repository.

Owners are always loaded together with their pets; the detail view also
loads every pet's visits. Both shapes come back from a single fetch.
"""

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import Select, select

from ..models import Owner, Pet, PetType, Visit
from ..query import NestedFetchSpec, Pageable, fetch_page
from ..schemas import OwnerSchema, Page, PetSchema, PetTypeSchema, VisitSchema
from .base import BaseRepository

logger = logging.getLogger(__name__)

owners = Owner.__table__
pets = Pet.__table__
types = PetType.__table__
visits = Visit.__table__


def owner_query() -> Select:
    return select(
        owners.c.id,
        owners.c.first_name,
        owners.c.last_name,
        owners.c.address,
        owners.c.city,
        owners.c.telephone,
    )


def pet_query() -> Select:
    """Pets with their type name, ordered by pet name."""
    return (
        select(
            pets.c.id,
            pets.c.name,
            pets.c.birth_date,
            pets.c.type_id,
            types.c.name.label("type_name"),
        )
        .select_from(pets.join(types, pets.c.type_id == types.c.id))
        .order_by(pets.c.name, pets.c.id)
    )


def visit_query() -> Select:
    """Visits, newest first."""
    return select(
        visits.c.id,
        visits.c.pet_id,
        visits.c.visit_date,
        visits.c.description,
    ).order_by(visits.c.visit_date.desc(), visits.c.id.desc())


PET_VISITS = NestedFetchSpec(
    name="visits",
    query=visit_query(),
    child_key=visits.c.pet_id,
    parent_key=pets.c.id,
)

OWNER_PETS = NestedFetchSpec(
    name="pets",
    query=pet_query(),
    child_key=pets.c.owner_id,
    parent_key=owners.c.id,
)

OWNER_PETS_WITH_VISITS = NestedFetchSpec(
    name="pets",
    query=pet_query(),
    child_key=pets.c.owner_id,
    parent_key=owners.c.id,
    children=(PET_VISITS,),
)


def to_visit(row: Mapping[str, Any]) -> VisitSchema:
    return VisitSchema(
        id=row["id"],
        pet_id=row["pet_id"],
        date=row["visit_date"],
        description=row["description"],
    )


def to_pet(row: Mapping[str, Any]) -> PetSchema:
    return PetSchema(
        id=row["id"],
        name=row["name"],
        birth_date=row["birth_date"],
        type=PetTypeSchema(id=row["type_id"], name=row["type_name"]),
        visits=[to_visit(visit) for visit in row.get("visits", [])],
    )


def to_owner(row: Mapping[str, Any]) -> OwnerSchema:
    return OwnerSchema(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        address=row["address"],
        city=row["city"],
        telephone=row["telephone"],
        pets=[to_pet(pet) for pet in row.get("pets", [])],
    )


class OwnerRepository(BaseRepository):
    """Read and write access to owners."""

    async def find_by_last_name(
        self, last_name: str, pageable: Optional[Pageable] = None
    ) -> Page[OwnerSchema]:
        """
        Find owners whose last name starts with ``last_name``, ignoring case.

        Each owner comes with their pets, without visits. Owners are sorted
        by last name, ties broken by id.

        Args:
            last_name: Last name prefix; an empty string matches every owner
            pageable: Requested page, the default page size when omitted

        Returns:
            One page of owners
        """
        base = owner_query().where(owners.c.last_name.ilike(f"{last_name}%"))
        return await fetch_page(
            self.session,
            base,
            [owners.c.last_name, owners.c.id],
            self.pageable(pageable),
            to_owner,
            fetcher=self.fetcher(OWNER_PETS),
        )

    async def find_by_id(self, id: int) -> Optional[OwnerSchema]:
        """Load one owner with their pets and every pet's visits."""
        rows = await self.fetcher(OWNER_PETS_WITH_VISITS).fetch(
            self.session, owner_query().where(owners.c.id == id)
        )
        if not rows:
            logger.debug(f"Owner {id} not found")
            return None
        return to_owner(rows[0])

    async def save(self, owner: OwnerSchema) -> int:
        """
        Insert a new owner or update the details of an existing one.

        Pets are not touched; they are saved through ``PetRepository``.

        Returns:
            Identifier of the saved owner

        Raises:
            QueryError: If the owner has an id that does not exist
            StoreError: If the store rejects the write
        """
        details = owner.model_dump(include={"first_name", "last_name", "address", "city", "telephone"})
        if owner.is_new():
            instance = Owner(**details)
            operation = "insert_owner"
        else:
            instance = await self._get_existing(Owner, owner.id)
            instance.update_fields(**details)
            operation = "update_owner"

        owner_id = await self._flush(instance, operation)
        logger.info(f"Saved owner {owner_id} ({owner.last_name})")
        return owner_id
