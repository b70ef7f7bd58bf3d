"""
Pydantic schemas for the clinic domain objects.

The repositories map hydrated rows into these schemas; ``Page`` wraps
paginated results.
"""

from .owner import OwnerSchema, PetSchema, PetTypeSchema, VisitSchema
from .page import Page
from .vet import SpecialtySchema, VetSchema

__all__ = [
    "OwnerSchema",
    "PetSchema",
    "PetTypeSchema",
    "VisitSchema",
    "SpecialtySchema",
    "VetSchema",
    "Page",
]
