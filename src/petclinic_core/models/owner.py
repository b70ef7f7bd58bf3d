"""
Owner model for the petclinic-core package.
"""

from typing import List

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class Owner(BaseModel):
    """Pet owner with contact details."""

    __tablename__ = "owners"

    first_name: Mapped[str] = mapped_column(String(30), nullable=False)
    last_name: Mapped[str] = mapped_column(String(30), nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(80), nullable=False)
    telephone: Mapped[str] = mapped_column(String(20), nullable=False)

    pets: Mapped[List["Pet"]] = relationship(back_populates="owner")

    __table_args__ = (Index("ix_owners_last_name", "last_name"),)
