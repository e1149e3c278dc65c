"""Service test fixtures - async DB, seeded records, authenticated FastAPI client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test session factory
    - The client sends a valid bearer token minted with the test secret

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for the
      conditional-update and unique-index behavior exercised here
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from httpx import ASGITransport, AsyncClient

import seat_allocator.models  # noqa: F401
from seat_allocator.db.base import Base
from seat_allocator.infrastructure.auth import issue_token
from seat_allocator.infrastructure.database import get_db
from seat_allocator.main import app
from seat_allocator.models.student import Student
from seat_allocator.services.route_registry import RouteRegistry


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {issue_token('user-1', 'admin')}"}


@pytest.fixture
async def anon_client(test_session_factory):
    """FastAPI test client with DB overridden and no credentials."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def client(anon_client, auth_headers):
    """Authenticated FastAPI test client."""
    anon_client.headers.update(auth_headers)
    return anon_client


@pytest.fixture
async def north_route(test_db):
    """Route 'North' with 5 seats."""
    route, _ = await RouteRegistry(test_db).create_route("North", 5)
    return route


@pytest.fixture
async def south_route(test_db):
    """Route 'South' with 3 seats."""
    route, _ = await RouteRegistry(test_db).create_route("South", 3)
    return route


async def _add_student(db, name, route):
    student = Student(name=name, grade="5", route_id=route.id)
    db.add(student)
    await db.commit()
    return student


@pytest.fixture
async def alice(test_db, north_route):
    return await _add_student(test_db, "Alice", north_route)


@pytest.fixture
async def bob(test_db, north_route):
    return await _add_student(test_db, "Bob", north_route)


@pytest.fixture
async def carol(test_db, south_route):
    return await _add_student(test_db, "Carol", south_route)
