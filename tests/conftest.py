"""
Pytest configuration and fixtures for petclinic-core tests.

Every test that touches the database gets its own SQLite file under
``tmp_path``, so tests never share state. The ``clinic_session`` fixture
seeds the classic pet clinic sample data; the scenario fixtures seed
smaller, purpose-built datasets.
"""

from datetime import date
from typing import AsyncGenerator, Dict, List

import pytest
import pytest_asyncio
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from petclinic_core.database.connection import create_engine
from petclinic_core.database.session import SessionManager
from petclinic_core.models import Owner, Pet, PetType, Specialty, Vet, Visit, vet_specialties
from petclinic_core.models.base import Base

SPECIALTIES = [
    {"id": 1, "name": "radiology"},
    {"id": 2, "name": "surgery"},
    {"id": 3, "name": "dentistry"},
]

VETS = [
    {"id": 1, "first_name": "James", "last_name": "Carter"},
    {"id": 2, "first_name": "Helen", "last_name": "Leary"},
    {"id": 3, "first_name": "Linda", "last_name": "Douglas"},
    {"id": 4, "first_name": "Rafael", "last_name": "Ortega"},
    {"id": 5, "first_name": "Henry", "last_name": "Stevens"},
    {"id": 6, "first_name": "Sharon", "last_name": "Jenkins"},
]

VET_SPECIALTIES = [
    {"vet_id": 2, "specialty_id": 1},
    {"vet_id": 3, "specialty_id": 2},
    {"vet_id": 3, "specialty_id": 3},
    {"vet_id": 4, "specialty_id": 2},
    {"vet_id": 5, "specialty_id": 1},
]

PET_TYPES = [
    {"id": 1, "name": "cat"},
    {"id": 2, "name": "dog"},
    {"id": 3, "name": "lizard"},
    {"id": 4, "name": "snake"},
    {"id": 5, "name": "bird"},
    {"id": 6, "name": "hamster"},
]

OWNERS = [
    (1, "George", "Franklin", "110 W. Liberty St.", "Madison", "6085551023"),
    (2, "Betty", "Davis", "638 Cardinal Ave.", "Sun Prairie", "6085551749"),
    (3, "Eduardo", "Rodriquez", "2693 Commerce St.", "McFarland", "6085558763"),
    (4, "Harold", "Davis", "563 Friendly St.", "Windsor", "6085553198"),
    (5, "Peter", "McTavish", "2387 S. Fair Way", "Madison", "6085552765"),
    (6, "Jean", "Coleman", "105 N. Lake St.", "Monona", "6085552654"),
    (7, "Jeff", "Black", "1450 Oak Blvd.", "Monona", "6085555387"),
    (8, "Maria", "Escobito", "345 Maple St.", "Madison", "6085557683"),
    (9, "David", "Schroeder", "2749 Blackhawk Trail", "Madison", "6085559435"),
    (10, "Carlos", "Estaban", "2335 Independence La.", "Waunakee", "6085555487"),
]

PETS = [
    (1, "Leo", date(2010, 9, 7), 1, 1),
    (2, "Basil", date(2012, 8, 6), 6, 2),
    (3, "Rosy", date(2011, 4, 17), 2, 3),
    (4, "Jewel", date(2010, 3, 7), 2, 3),
    (5, "Iggy", date(2010, 11, 30), 3, 4),
    (6, "George", date(2010, 1, 20), 4, 5),
    (7, "Samantha", date(2012, 9, 4), 1, 6),
    (8, "Max", date(2012, 9, 4), 1, 6),
    (9, "Lucky", date(2011, 8, 6), 5, 7),
    (10, "Mulligan", date(2007, 2, 24), 2, 8),
    (11, "Freddy", date(2010, 3, 9), 5, 9),
    (12, "Lucky", date(2010, 6, 24), 2, 10),
    (13, "Sly", date(2012, 6, 8), 1, 10),
]

VISITS = [
    (1, 7, date(2013, 1, 1), "rabies shot"),
    (2, 8, date(2013, 1, 2), "rabies shot"),
    (3, 8, date(2013, 1, 3), "neutered"),
    (4, 7, date(2013, 1, 4), "spayed"),
]


def owner_rows() -> List[Dict]:
    return [
        dict(zip(("id", "first_name", "last_name", "address", "city", "telephone"), row))
        for row in OWNERS
    ]


def pet_rows() -> List[Dict]:
    return [
        dict(zip(("id", "name", "birth_date", "type_id", "owner_id"), row))
        for row in PETS
    ]


def visit_rows() -> List[Dict]:
    return [
        dict(zip(("id", "pet_id", "visit_date", "description"), row)) for row in VISITS
    ]


@pytest.fixture
def database_url(tmp_path) -> str:
    """SQLite file database private to the current test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'petclinic_test.db'}"


@pytest_asyncio.fixture
async def test_engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine without connection pooling."""
    engine = create_engine(database_url, use_null_pool=True, echo=False)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_manager(
    test_engine: AsyncEngine,
) -> AsyncGenerator[SessionManager, None]:
    """Session manager over an empty clinic schema."""
    manager = SessionManager(test_engine)
    await manager.initialize_database(Base.metadata)
    yield manager


@pytest_asyncio.fixture
async def empty_session(
    session_manager: SessionManager,
) -> AsyncGenerator[AsyncSession, None]:
    """Session on the empty clinic schema."""
    async with session_manager.get_session() as session:
        yield session


@pytest_asyncio.fixture
async def clinic_session(
    session_manager: SessionManager, test_engine: AsyncEngine
) -> AsyncGenerator[AsyncSession, None]:
    """Session on a database seeded with the pet clinic sample data."""
    async with test_engine.begin() as conn:
        await conn.execute(insert(Specialty.__table__), SPECIALTIES)
        await conn.execute(insert(Vet.__table__), VETS)
        await conn.execute(insert(vet_specialties), VET_SPECIALTIES)
        await conn.execute(insert(PetType.__table__), PET_TYPES)
        await conn.execute(insert(Owner.__table__), owner_rows())
        await conn.execute(insert(Pet.__table__), pet_rows())
        await conn.execute(insert(Visit.__table__), visit_rows())

    async with session_manager.get_session() as session:
        yield session


@pytest_asyncio.fixture
async def twenty_five_owners(
    session_manager: SessionManager, test_engine: AsyncEngine
) -> AsyncGenerator[AsyncSession, None]:
    """
    Session on a database holding 25 owners and nothing else.

    Last names are ``Owner01`` .. ``Owner25``, inserted in reverse order so
    that id order and last name order disagree.
    """
    rows = [
        {
            "id": 26 - rank,
            "first_name": f"First{rank:02d}",
            "last_name": f"Owner{rank:02d}",
            "address": f"{rank} Main St.",
            "city": "Madison",
            "telephone": f"60855500{rank:02d}",
        }
        for rank in range(25, 0, -1)
    ]
    async with test_engine.begin() as conn:
        await conn.execute(insert(Owner.__table__), rows)

    async with session_manager.get_session() as session:
        yield session


@pytest_asyncio.fixture
async def three_vets(
    session_manager: SessionManager, test_engine: AsyncEngine
) -> AsyncGenerator[AsyncSession, None]:
    """Session on a database with 3 vets; only vet 2 has specialties."""
    async with test_engine.begin() as conn:
        await conn.execute(insert(Specialty.__table__), SPECIALTIES)
        await conn.execute(
            insert(Vet.__table__),
            [
                {"id": 1, "first_name": "James", "last_name": "Carter"},
                {"id": 2, "first_name": "Linda", "last_name": "Douglas"},
                {"id": 3, "first_name": "Sharon", "last_name": "Jenkins"},
            ],
        )
        await conn.execute(
            insert(vet_specialties),
            [{"vet_id": 2, "specialty_id": 2}, {"vet_id": 2, "specialty_id": 3}],
        )

    async with session_manager.get_session() as session:
        yield session


@pytest.fixture(params=["correlated", "batched"])
def nested_strategy(request) -> str:
    """Run a test once per nested fetch strategy."""
    return request.param
