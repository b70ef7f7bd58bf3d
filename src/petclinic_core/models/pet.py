"""
Pet, pet type and visit models for the petclinic-core package.

Pets belong to exactly one owner and one type; visits belong to exactly
one pet. The foreign keys are the correlation columns used when pets and
visits are fetched as nested collections.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class PetType(BaseModel):
    """Kind of animal (cat, dog, lizard, ...)."""

    __tablename__ = "types"

    name: Mapped[str] = mapped_column(String(80), nullable=False, unique=True)


class Pet(BaseModel):
    """Pet registered to an owner."""

    __tablename__ = "pets"

    name: Mapped[str] = mapped_column(String(30), nullable=False)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    type_id: Mapped[int] = mapped_column(
        ForeignKey("types.id"), nullable=False, comment="Kind of animal"
    )
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("owners.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owner the pet is registered to",
    )

    owner: Mapped["Owner"] = relationship(back_populates="pets")
    visits: Mapped[List["Visit"]] = relationship(back_populates="pet")

    __table_args__ = (Index("ix_pets_name", "name"),)


class Visit(BaseModel):
    """A single visit of a pet to the clinic."""

    __tablename__ = "visits"

    pet_id: Mapped[int] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    visit_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    pet: Mapped["Pet"] = relationship(back_populates="visits")
