"""
Veterinarian and specialty models for the petclinic-core package.

Vets and specialties are linked many-to-many through the
``vet_specialties`` association table.
"""

from typing import List

from sqlalchemy import Column, ForeignKey, Index, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, BaseModel

vet_specialties = Table(
    "vet_specialties",
    Base.metadata,
    Column(
        "vet_id",
        ForeignKey("vets.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "specialty_id",
        ForeignKey("specialties.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Specialty(BaseModel):
    """Medical specialty (radiology, surgery, dentistry, ...)."""

    __tablename__ = "specialties"

    name: Mapped[str] = mapped_column(String(80), nullable=False, unique=True)


class Vet(BaseModel):
    """Veterinarian working at the clinic."""

    __tablename__ = "vets"

    first_name: Mapped[str] = mapped_column(String(30), nullable=False)
    last_name: Mapped[str] = mapped_column(String(30), nullable=False)

    specialties: Mapped[List[Specialty]] = relationship(secondary=vet_specialties)

    __table_args__ = (Index("ix_vets_last_name", "last_name"),)
