"""
Owner, pet and visit Pydantic schemas.

These are the domain objects handed back by the repositories. Nested
collections (an owner's pets, a pet's visits) are filled in one pass from
hydrated rows, never by follow-up queries.
"""

import datetime as dt
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PetTypeSchema(BaseModel):
    """Schema for a kind of animal."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = Field(None, description="Pet type identifier")
    name: str = Field(..., description="Pet type name, e.g. 'cat'")


class VisitSchema(BaseModel):
    """Schema for a visit to the clinic."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = Field(None, description="Visit identifier")
    pet_id: Optional[int] = Field(None, description="Pet the visit belongs to")
    date: Optional[dt.date] = Field(None, description="Date of the visit")
    description: Optional[str] = Field(None, description="What happened")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        """Strip surrounding whitespace from the description."""
        if v is None:
            return v
        return v.strip()


class PetSchema(BaseModel):
    """Schema for a pet and, when loaded, its visits."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = Field(None, description="Pet identifier")
    name: str = Field(..., min_length=1, max_length=30, description="Pet's name")
    birth_date: Optional[dt.date] = Field(None, description="Pet's birth date")
    type: Optional[PetTypeSchema] = Field(None, description="Kind of animal")
    visits: List[VisitSchema] = Field(default_factory=list)

    def is_new(self) -> bool:
        return self.id is None

    def add_visit(self, visit: VisitSchema) -> None:
        self.visits.append(visit)


class OwnerSchema(BaseModel):
    """Schema for a pet owner and, when loaded, their pets."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = Field(None, description="Owner identifier")
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=80)
    telephone: str = Field(..., description="Up to ten digits")
    pets: List[PetSchema] = Field(default_factory=list)

    @field_validator("telephone")
    @classmethod
    def validate_telephone(cls, v: str) -> str:
        """Validate telephone holds at most ten digits."""
        v = v.strip()
        if not v.isdigit() or len(v) > 10:
            raise ValueError("Telephone must be numeric with at most 10 digits")
        return v

    def is_new(self) -> bool:
        return self.id is None

    def get_pet(self, key: Union[int, str], ignore_new: bool = False) -> Optional[PetSchema]:
        """
        Find one of the owner's pets by id or by name.

        Args:
            key: Pet id, or pet name (compared case-insensitively)
            ignore_new: Skip pets that have not been saved yet

        Returns:
            The matching pet, or None
        """
        for pet in self.pets:
            if ignore_new and pet.is_new():
                continue
            if isinstance(key, int):
                if pet.id == key:
                    return pet
            elif pet.name.lower() == key.lower():
                return pet
        return None
