"""Assignment Engine - binds, unbinds and resets seat occupancy.

Invariants:
    - assign_seat checks preconditions in a fixed order, first failure wins
      (core/enforce_assignment.validate_assignment)
    - An occupied seat always carries its student's route; a mismatching
      seat is moved onto the student's route and a warning is logged
    - A mutation is either fully committed or fully rolled back
    - No retries inside the engine; every failure reaches the caller typed

Design Decisions:
    - Two layers of serialization: an in-process lock per seat and per student
      (held through commit), plus conditional UPDATEs and the unique index on
      seats.student_id for concurrent writers in other processes
    - _assignment_locks is module-level: every engine instance in the process
      must share it, and engines are created per request
    - clear_route_on_remove=True removes the seat's route reference together with
      the student; reset_all always keeps it
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocator.core.domain_types import (
    LockKind, RouteId, SeatId, StudentId, lock_key,
)
from seat_allocator.core.enforce_assignment import (
    SEAT_ALREADY_OCCUPIED, SEAT_NOT_OCCUPIED, STUDENT_ALREADY_ASSIGNED,
    check_removable, resolve_target_route, validate_assignment,
)
from seat_allocator.core.errors import ConflictError, ErrorContext
from seat_allocator.core.repository_protocols import SeatStoreContract
from seat_allocator.core.views import build_seat_view
from seat_allocator.infrastructure.database import storage_guard
from seat_allocator.infrastructure.key_locks import KeyedLocks
from seat_allocator.models.route import Route
from seat_allocator.models.student import Student
from seat_allocator.services.seat_store import SeatStore

logger = logging.getLogger(__name__)

_assignment_locks = KeyedLocks()


class AssignmentEngine:
    """Seat <-> student binding over one AsyncSession."""

    def __init__(self, db: AsyncSession, clear_route_on_remove: bool = True):
        self.db = db
        self.seats: SeatStoreContract = SeatStore(db)
        self.clear_route_on_remove = clear_route_on_remove

    async def _abort(self, error: Exception) -> None:
        await self.db.rollback()
        raise error

    async def assign_seat(self, seat_id: SeatId, student_id: StudentId) -> dict:
        """Occupy seat_id with student_id. Returns the resolved seat view."""
        ctx = ErrorContext(seat_id=str(seat_id), student_id=str(student_id))
        keys = (
            lock_key(LockKind.SEAT, seat_id),
            lock_key(LockKind.STUDENT, student_id),
        )
        async with _assignment_locks.hold(*keys):
            async with storage_guard(self.db, "assign_seat"):
                current = await self.seats.find_by_student(student_id)
                seat = await self.seats.find_by_id(seat_id)
                student = await self.db.get(Student, student_id)
                route = (
                    await self.db.get(Route, student.route_id)
                    if student is not None else None
                )
                error = validate_assignment(
                    current, seat, student, route, seat_id, student_id,
                )
                if error:
                    await self._abort(error)

                target_route_id, repaired = resolve_target_route(seat, student)
                if repaired:
                    logger.warning(
                        f"Seat {seat.seat_number} moved from route "
                        f"{seat.route_id} to student's route {target_route_id}",
                        extra={"seat_id": str(seat_id), "route_id": str(target_route_id)},
                    )

                try:
                    claimed = await self.seats.claim(
                        seat_id, student_id, target_route_id,
                    )
                    if claimed:
                        await self.db.commit()
                except IntegrityError:
                    # unique index on seats.student_id: another writer won the student
                    await self._abort(ConflictError(STUDENT_ALREADY_ASSIGNED, ctx))
                if not claimed:
                    await self._abort(ConflictError(SEAT_ALREADY_OCCUPIED, ctx))

                seat = await self.seats.find_by_id(seat_id)

        logger.info(
            f"Seat {seat.seat_number} assigned to '{student.name}'",
            extra={
                "seat_id": str(seat_id), "student_id": str(student_id),
                "route_id": str(target_route_id),
            },
        )
        return build_seat_view(seat, {student.id: student}, {route.id: route})

    async def remove_assignment(self, seat_id: SeatId) -> None:
        """Free an occupied seat."""
        async with _assignment_locks.hold(lock_key(LockKind.SEAT, seat_id)):
            async with storage_guard(self.db, "remove_assignment"):
                seat = await self.seats.find_by_id(seat_id)
                error = check_removable(seat, seat_id)
                if error:
                    await self._abort(error)
                released = await self.seats.release(
                    seat_id, clear_route=self.clear_route_on_remove,
                )
                if not released:
                    await self._abort(ConflictError(
                        SEAT_NOT_OCCUPIED, ErrorContext(seat_id=str(seat_id)),
                    ))
                await self.db.commit()

        logger.info(
            f"Assignment removed from seat {seat.seat_number}",
            extra={"seat_id": str(seat_id)},
        )

    async def reset_all(self, route_id: RouteId | None = None) -> int:
        """Free every seat, or every seat on one route. Route references are kept."""
        async with storage_guard(self.db, "reset_seats"):
            count = await self.seats.bulk_reset_occupancy(route_id)
            await self.db.commit()
        logger.info(
            f"Reset occupancy on {count} seats",
            extra={
                "seats_reset": count,
                "route_id": str(route_id) if route_id else None,
            },
        )
        return count
