"""
Database models for the petclinic-core package.

This module contains SQLAlchemy models for the clinic schema: owners,
pets, pet types, visits, vets and specialties.
"""

# Base model will be imported by all other models
from .base import Base, BaseModel
from .owner import Owner
from .pet import Pet, PetType, Visit
from .vet import Specialty, Vet, vet_specialties

__all__ = [
    "Base",
    "BaseModel",
    "Owner",
    "Pet",
    "PetType",
    "Visit",
    "Vet",
    "Specialty",
    "vet_specialties",
]
