"""
Pet and pet type repository.
"""

import logging
from typing import List, Optional

from sqlalchemy import select

from ..exceptions import QueryError
from ..models import Pet, PetType
from ..query import fetch_rows
from ..schemas import PetSchema, PetTypeSchema
from .base import BaseRepository
from .owner import pet_query, pets, to_pet, types

logger = logging.getLogger(__name__)


def _type_id(pet: PetSchema) -> int:
    if pet.type is None or pet.type.id is None:
        raise QueryError(
            f"Pet '{pet.name}' has no saved pet type",
            reason="missing_type",
            column="type_id",
        )
    return pet.type.id


class PetRepository(BaseRepository):
    """Read and write access to pets and their types."""

    async def find_pet_types(self) -> List[PetTypeSchema]:
        """All pet types ordered by name."""
        rows = await fetch_rows(
            self.session,
            select(types.c.id, types.c.name).order_by(types.c.name),
            "find_pet_types",
        )
        return [PetTypeSchema(id=row["id"], name=row["name"]) for row in rows]

    async def find_by_id(self, id: int) -> Optional[PetSchema]:
        """Load one pet with its type; visits are not loaded."""
        rows = await fetch_rows(
            self.session, pet_query().where(pets.c.id == id), "find_pet_by_id"
        )
        return to_pet(rows[0]) if rows else None

    async def save(self, owner_id: int, pet: PetSchema) -> int:
        """
        Register a new pet for an owner.

        Returns:
            Identifier generated for the pet

        Raises:
            QueryError: If the pet has no saved type
            StoreError: If the store rejects the write
        """
        instance = Pet(
            name=pet.name,
            birth_date=pet.birth_date,
            type_id=_type_id(pet),
            owner_id=owner_id,
        )
        pet_id = await self._flush(instance, "insert_pet")
        logger.info(f"Saved pet {pet_id} for owner {owner_id}")
        return pet_id

    async def update(self, pet: PetSchema) -> int:
        """
        Update name, birth date and type of an existing pet.

        Returns:
            Identifier of the updated pet
        """
        if pet.id is None:
            raise QueryError(
                f"Pet '{pet.name}' has not been saved yet", reason="unknown_id", column="id"
            )
        instance = await self._get_existing(Pet, pet.id)
        instance.update_fields(
            name=pet.name, birth_date=pet.birth_date, type_id=_type_id(pet)
        )
        return await self._flush(instance, "update_pet")
