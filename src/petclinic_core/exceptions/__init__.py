"""
Custom exceptions for the petclinic-core package.

This module defines the exception hierarchy used by the query layer and
the repositories.
"""

from .core_exceptions import (
    PetClinicException,
    QueryError,
    StoreError,
    create_error_response,
)

__all__ = [
    # Exception classes
    "PetClinicException",
    "QueryError",
    "StoreError",
    # Utility functions
    "create_error_response",
]
