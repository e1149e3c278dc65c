"""Assignment Engine - binding, unbinding and reset semantics.

Invariants:
    - Preconditions fail in order with ConflictError / NotFoundError
    - Failed operations leave seat state unchanged
    - remove_assignment clears route by default; reset_all keeps it
    - occupancy rules hold after every operation in a random sequence

Identities are copied into plain locals before any call expected to fail:
a failed operation rolls the shared session back, which expires every ORM
instance the fixtures handed out.
"""

import logging
import random
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from seat_allocator.core.errors import ConflictError, NotFoundError
from seat_allocator.core.invariants import find_violations
from seat_allocator.services.assignment_engine import AssignmentEngine
from seat_allocator.services.seat_store import SeatStore

ENGINE_LOGGER = "seat_allocator.services.assignment_engine"


async def _seat_ids(db, route_id):
    return [s.id for s in await SeatStore(db).find_by_route(route_id)]


# ─── assign_seat ─────────────────────────────────────────────────

async def test_assign_free_seat_on_own_route(test_db, north_route, alice):
    route_id, alice_id = north_route.id, alice.id
    seat_id = (await _seat_ids(test_db, route_id))[0]

    view = await AssignmentEngine(test_db).assign_seat(seat_id, alice_id)

    assert view["isOccupied"] is True
    assert view["student"]["name"] == "Alice"
    assert view["route"]["name"] == "North"
    stored = await SeatStore(test_db).find_by_id(seat_id)
    assert stored.is_occupied
    assert stored.student_id == alice_id
    assert stored.route_id == route_id


async def test_assign_foreign_seat_moves_it_to_student_route(
    test_db, north_route, south_route, carol, caplog,
):
    south_id = south_route.id
    seat_id = (await _seat_ids(test_db, north_route.id))[0]

    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        view = await AssignmentEngine(test_db).assign_seat(seat_id, carol.id)

    assert view["routeId"] == str(south_id)
    stored = await SeatStore(test_db).find_by_id(seat_id)
    assert stored.route_id == south_id
    assert any("moved from route" in r.message for r in caplog.records)


async def test_student_cannot_take_second_seat(test_db, north_route, alice):
    alice_id = alice.id
    first_id, second_id = (await _seat_ids(test_db, north_route.id))[:2]
    engine = AssignmentEngine(test_db)
    await engine.assign_seat(first_id, alice_id)

    with pytest.raises(ConflictError, match="student already assigned"):
        await engine.assign_seat(second_id, alice_id)

    store = SeatStore(test_db)
    assert (await store.find_by_student(alice_id)).id == first_id
    assert not (await store.find_by_id(second_id)).is_occupied


async def test_occupied_seat_rejected_and_unchanged(test_db, north_route, alice, bob):
    alice_id, bob_id = alice.id, bob.id
    seat_id = (await _seat_ids(test_db, north_route.id))[0]
    engine = AssignmentEngine(test_db)
    await engine.assign_seat(seat_id, alice_id)

    with pytest.raises(ConflictError, match="seat already occupied"):
        await engine.assign_seat(seat_id, bob_id)

    store = SeatStore(test_db)
    assert (await store.find_by_id(seat_id)).student_id == alice_id
    assert await store.find_by_student(bob_id) is None


async def test_unknown_seat(test_db, alice):
    with pytest.raises(NotFoundError, match="seat not found"):
        await AssignmentEngine(test_db).assign_seat(uuid4(), alice.id)


async def test_unknown_student(test_db, north_route):
    seat_id = (await _seat_ids(test_db, north_route.id))[0]

    with pytest.raises(NotFoundError, match="student not found"):
        await AssignmentEngine(test_db).assign_seat(seat_id, uuid4())

    assert not (await SeatStore(test_db).find_by_id(seat_id)).is_occupied


async def test_seat_claimed_by_other_writer_is_conflict(
    test_db, north_route, alice, bob,
):
    """Precondition read saw the seat free, but the row was taken before the update."""
    route_id, alice_id, bob_id = north_route.id, alice.id, bob.id
    seat_id = (await _seat_ids(test_db, route_id))[0]
    await AssignmentEngine(test_db).assign_seat(seat_id, alice_id)

    engine = AssignmentEngine(test_db)
    stale = SimpleNamespace(
        id=seat_id, seat_number=1, is_occupied=False,
        route_id=route_id, student_id=None,
    )
    engine.seats.find_by_id = AsyncMock(return_value=stale)

    with pytest.raises(ConflictError, match="seat already occupied"):
        await engine.assign_seat(seat_id, bob_id)

    stored = await SeatStore(test_db).find_by_id(seat_id)
    assert stored.student_id == alice_id


async def test_student_claimed_by_other_writer_is_conflict(
    test_db, north_route, alice,
):
    """Unique index on seats.student_id catches a student assigned elsewhere meanwhile."""
    alice_id = alice.id
    first_id, second_id = (await _seat_ids(test_db, north_route.id))[:2]
    await AssignmentEngine(test_db).assign_seat(first_id, alice_id)

    engine = AssignmentEngine(test_db)
    engine.seats.find_by_student = AsyncMock(return_value=None)

    with pytest.raises(ConflictError, match="student already assigned"):
        await engine.assign_seat(second_id, alice_id)

    assert not (await SeatStore(test_db).find_by_id(second_id)).is_occupied


# ─── remove_assignment ───────────────────────────────────────────

async def test_remove_free_seat_is_conflict(test_db, north_route):
    seat_id = (await _seat_ids(test_db, north_route.id))[0]

    with pytest.raises(ConflictError, match="seat not occupied"):
        await AssignmentEngine(test_db).remove_assignment(seat_id)

    assert not (await SeatStore(test_db).find_by_id(seat_id)).is_occupied


async def test_remove_unknown_seat_is_conflict(test_db):
    with pytest.raises(ConflictError, match="seat not occupied"):
        await AssignmentEngine(test_db).remove_assignment(uuid4())


async def test_remove_clears_occupancy_and_route(test_db, north_route, alice):
    seat_id = (await _seat_ids(test_db, north_route.id))[0]
    engine = AssignmentEngine(test_db)
    await engine.assign_seat(seat_id, alice.id)

    await engine.remove_assignment(seat_id)

    stored = await SeatStore(test_db).find_by_id(seat_id)
    assert not stored.is_occupied
    assert stored.student_id is None
    assert stored.route_id is None


async def test_remove_can_keep_route_when_configured(test_db, north_route, alice):
    route_id = north_route.id
    seat_id = (await _seat_ids(test_db, route_id))[0]
    engine = AssignmentEngine(test_db, clear_route_on_remove=False)
    await engine.assign_seat(seat_id, alice.id)

    await engine.remove_assignment(seat_id)

    stored = await SeatStore(test_db).find_by_id(seat_id)
    assert not stored.is_occupied
    assert stored.route_id == route_id


async def test_assign_remove_assign_cycle(test_db, north_route, alice, caplog):
    route_id, alice_id = north_route.id, alice.id
    seat_id = (await _seat_ids(test_db, route_id))[0]
    engine = AssignmentEngine(test_db)

    await engine.assign_seat(seat_id, alice_id)
    await engine.remove_assignment(seat_id)
    assert (await SeatStore(test_db).find_by_id(seat_id)).route_id is None

    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        view = await engine.assign_seat(seat_id, alice_id)

    assert view["isOccupied"] is True
    assert view["routeId"] == str(route_id)
    assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []


# ─── reset_all ───────────────────────────────────────────────────

async def test_reset_all_frees_every_seat_and_keeps_routes(
    test_db, north_route, south_route, alice, carol,
):
    route_ids = {north_route.id, south_route.id}
    north_seat = (await _seat_ids(test_db, north_route.id))[0]
    south_seat = (await _seat_ids(test_db, south_route.id))[0]
    engine = AssignmentEngine(test_db)
    await engine.assign_seat(north_seat, alice.id)
    await engine.assign_seat(south_seat, carol.id)

    count = await engine.reset_all()

    assert count == 8
    for seat in await SeatStore(test_db).find_all():
        assert not seat.is_occupied
        assert seat.student_id is None
        assert seat.route_id in route_ids


async def test_reset_one_route_only(test_db, north_route, south_route, alice, carol):
    carol_id = carol.id
    north_seat = (await _seat_ids(test_db, north_route.id))[0]
    south_seat = (await _seat_ids(test_db, south_route.id))[0]
    engine = AssignmentEngine(test_db)
    await engine.assign_seat(north_seat, alice.id)
    await engine.assign_seat(south_seat, carol_id)

    count = await engine.reset_all(north_route.id)

    assert count == 5
    store = SeatStore(test_db)
    assert not (await store.find_by_id(north_seat)).is_occupied
    assert (await store.find_by_id(south_seat)).student_id == carol_id


async def test_reset_is_idempotent(test_db, north_route):
    engine = AssignmentEngine(test_db)
    assert await engine.reset_all() == 5
    assert await engine.reset_all() == 5


# ─── invariants under random sequences ───────────────────────────

@pytest.mark.parametrize("seed", [1, 7, 42])
async def test_invariants_hold_after_every_operation(
    test_db, north_route, south_route, alice, bob, carol, seed,
):
    rng = random.Random(seed)
    engine = AssignmentEngine(test_db)
    store = SeatStore(test_db)
    students = {
        s.id: SimpleNamespace(id=s.id, route_id=s.route_id)
        for s in (alice, bob, carol)
    }
    seat_ids = [s.id for s in await store.find_all()] + [uuid4()]
    student_ids = list(students) + [uuid4()]
    failures = 0

    for _ in range(40):
        op = rng.choice(["assign", "assign", "assign", "remove", "reset"])
        try:
            if op == "assign":
                await engine.assign_seat(rng.choice(seat_ids), rng.choice(student_ids))
            elif op == "remove":
                await engine.remove_assignment(rng.choice(seat_ids))
            else:
                await engine.reset_all()
        except (ConflictError, NotFoundError):
            failures += 1
        assert find_violations(await store.find_all(), students) == []

    assert failures > 0
