"""
Vet and specialty Pydantic schemas.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class SpecialtySchema(BaseModel):
    """Schema for a veterinary specialty."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = Field(None, description="Specialty identifier")
    name: str = Field(..., description="Specialty name, e.g. 'surgery'")


class VetSchema(BaseModel):
    """
    Schema for a veterinarian with their specialties.

    Specialties are kept sorted by name regardless of the order they were
    supplied in.
    """

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = Field(None, description="Vet identifier")
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    specialties: List[SpecialtySchema] = Field(default_factory=list)

    def model_post_init(self, __context) -> None:
        self.specialties.sort(key=lambda specialty: specialty.name)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def nr_of_specialties(self) -> int:
        return len(self.specialties)

    def add_specialty(self, specialty: SpecialtySchema) -> None:
        self.specialties.append(specialty)
        self.specialties.sort(key=lambda item: item.name)
