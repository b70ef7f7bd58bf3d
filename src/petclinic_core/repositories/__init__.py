"""
Repository facades over the query layer.

Each repository works on one ``AsyncSession`` and maps hydrated rows into
the Pydantic schemas.
"""

from .base import BaseRepository
from .owner import OwnerRepository
from .pet import PetRepository
from .vet import VetRepository
from .visit import VisitRepository

__all__ = [
    "BaseRepository",
    "OwnerRepository",
    "PetRepository",
    "VetRepository",
    "VisitRepository",
]
