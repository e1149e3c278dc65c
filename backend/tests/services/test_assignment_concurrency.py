"""Concurrent assignment - at most one writer wins a seat or a student.

Each engine runs on its own session over a file-backed SQLite database so the
two callers really are independent transactions.
"""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import NullPool

import seat_allocator.models  # noqa: F401
from seat_allocator.core.errors import ConflictError
from seat_allocator.core.invariants import find_violations
from seat_allocator.core.views import index_by_id
from seat_allocator.db.base import Base
from seat_allocator.models.student import Student
from seat_allocator.services.assignment_engine import AssignmentEngine
from seat_allocator.services.route_registry import RouteRegistry
from seat_allocator.services.seat_store import SeatStore


@pytest.fixture
async def file_sessions(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'seats.db'}", poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def seeded(file_sessions):
    async with file_sessions() as db:
        route, _ = await RouteRegistry(db).create_route("East", 4)
        students = [
            Student(name=name, grade="3", route_id=route.id)
            for name in ("Dana", "Eli")
        ]
        db.add_all(students)
        await db.commit()
        seats = list(await SeatStore(db).find_by_route(route.id))
    return route, seats, students


async def _attempt(sessions, seat_id, student_id):
    async with sessions() as db:
        try:
            return await AssignmentEngine(db).assign_seat(seat_id, student_id)
        except ConflictError as e:
            return e


async def test_two_students_race_for_one_seat(file_sessions, seeded):
    _, seats, (dana, eli) = seeded

    results = await asyncio.gather(
        _attempt(file_sessions, seats[0].id, dana.id),
        _attempt(file_sessions, seats[0].id, eli.id),
    )

    wins = [r for r in results if isinstance(r, dict)]
    losses = [r for r in results if isinstance(r, ConflictError)]
    assert len(wins) == 1
    assert len(losses) == 1
    assert losses[0].message == "seat already occupied"

    async with file_sessions() as db:
        stored = await SeatStore(db).find_by_id(seats[0].id)
    assert str(stored.student_id) == wins[0]["studentId"]


async def test_one_student_races_for_two_seats(file_sessions, seeded):
    _, seats, (dana, _) = seeded

    results = await asyncio.gather(
        _attempt(file_sessions, seats[0].id, dana.id),
        _attempt(file_sessions, seats[1].id, dana.id),
    )

    assert sum(isinstance(r, dict) for r in results) == 1
    loss = next(r for r in results if isinstance(r, ConflictError))
    assert loss.message == "student already assigned"

    async with file_sessions() as db:
        occupied = [s for s in await SeatStore(db).find_all() if s.is_occupied]
    assert len(occupied) == 1
    assert occupied[0].student_id == dana.id


async def test_many_concurrent_assignments_keep_invariants(file_sessions, seeded):
    _, seats, students = seeded

    await asyncio.gather(*[
        _attempt(file_sessions, seat.id, student.id)
        for seat in seats for student in students
    ])

    async with file_sessions() as db:
        all_seats = await SeatStore(db).find_all()
    assert find_violations(all_seats, index_by_id(students)) == []
    assert sum(s.is_occupied for s in all_seats) == len(students)
