"""
Petclinic Core Package

Data access core for the pet clinic application: owners, pets, visits,
vets and specialties stored in a relational database.

The package is built around two query techniques:

- Single round trip pagination: a page, the total row count and the page
  metadata are computed by one statement using window functions
- Nested collection fetching: owners with pets and visits, or vets with
  specialties, are loaded without issuing one query per parent row

Quick Start:
    >>> from petclinic_core.database import create_engine, initialize_session_manager
    >>> from petclinic_core.query import Pageable
    >>> from petclinic_core.repositories import OwnerRepository

    >>> engine = create_engine("sqlite+aiosqlite:///petclinic.db")
    >>> manager = initialize_session_manager(engine)
    >>> async with manager.get_session() as session:
    ...     page = await OwnerRepository(session).find_by_last_name(
    ...         "Dav", Pageable.of(0, 10)
    ...     )
    ...     print(page.total_elements, [o.last_name for o in page.content])

Requirements:
    - Python 3.11+
    - SQLAlchemy 2.0+
    - Pydantic 2.5+
    - PostgreSQL 13+ or SQLite 3.35+
"""

__version__ = "0.1.0"
__author__ = "Pet Clinic Team"
__license__ = "MIT"

# Import implemented modules
from . import database
from . import exceptions
from . import models
from . import query
from . import repositories
from . import schemas
from . import utils

# Convenience imports for common usage patterns
from .database import create_engine, get_session, get_transaction
from .exceptions import PetClinicException, QueryError, StoreError
from .query import AggregateFetcher, NestedFetchSpec, Pageable, paginate, with_nested
from .schemas import Page

__all__ = [
    # Version and metadata
    "__version__",
    "__author__",
    "__license__",
    # Core modules
    "database",
    "exceptions",
    "models",
    "query",
    "repositories",
    "schemas",
    "utils",
    # Convenience imports
    "create_engine",
    "get_session",
    "get_transaction",
    "PetClinicException",
    "QueryError",
    "StoreError",
    "AggregateFetcher",
    "NestedFetchSpec",
    "Pageable",
    "Page",
    "paginate",
    "with_nested",
]
