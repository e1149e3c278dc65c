"""Assignment Enforcement - precondition checks for binding and unbinding seats.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return the typed error on violation, None on success (caller raises)
    - validate_assignment chains the checks in a fixed order, first error wins:
      student unassigned -> seat exists -> seat free -> student resolves
    - resolve_target_route always answers the student's route

Design Decisions:
    - Return errors instead of raising: the engine decides when to raise, so the
      checks are testable without pytest.raises noise
    - Seat/route mismatch is repaired, not rejected: the student's route is the
      authoritative side of the seat/route coupling
"""

from uuid import UUID

from seat_allocator.core.errors import (
    ConflictError, ErrorContext, NotFoundError, SeatAllocatorError,
)
from seat_allocator.core.repository_protocols import (
    RouteLike, SeatLike, StudentLike,
)


STUDENT_ALREADY_ASSIGNED = "student already assigned"
SEAT_NOT_FOUND = "seat not found"
SEAT_ALREADY_OCCUPIED = "seat already occupied"
STUDENT_NOT_FOUND = "student not found"
SEAT_NOT_OCCUPIED = "seat not occupied"


def check_student_unassigned(
    current_seat: SeatLike | None, student_id: UUID,
) -> ConflictError | None:
    """A student occupies at most one seat system-wide."""
    if current_seat is not None:
        return ConflictError(
            STUDENT_ALREADY_ASSIGNED,
            ErrorContext(
                student_id=str(student_id), seat_id=str(current_seat.id),
            ),
        )
    return None


def check_seat_exists(
    seat: SeatLike | None, seat_id: UUID,
) -> NotFoundError | None:
    if seat is None:
        return NotFoundError(SEAT_NOT_FOUND, ErrorContext(seat_id=str(seat_id)))
    return None


def check_seat_free(seat: SeatLike) -> ConflictError | None:
    if seat.is_occupied:
        return ConflictError(
            SEAT_ALREADY_OCCUPIED, ErrorContext(seat_id=str(seat.id)),
        )
    return None


def check_student_resolves(
    student: StudentLike | None, route: RouteLike | None, student_id: UUID,
) -> NotFoundError | None:
    """Student must exist and point at an existing route."""
    if student is None or route is None:
        return NotFoundError(
            STUDENT_NOT_FOUND, ErrorContext(student_id=str(student_id)),
        )
    return None


def validate_assignment(
    current_seat: SeatLike | None,
    seat: SeatLike | None,
    student: StudentLike | None,
    student_route: RouteLike | None,
    seat_id: UUID,
    student_id: UUID,
) -> SeatAllocatorError | None:
    """Chain all assignment preconditions. Returns first error or None."""
    return (
        check_student_unassigned(current_seat, student_id)
        or check_seat_exists(seat, seat_id)
        or check_seat_free(seat)
        or check_student_resolves(student, student_route, student_id)
    )


def resolve_target_route(
    seat: SeatLike, student: StudentLike,
) -> tuple[UUID | None, bool]:
    """Route the seat must carry once occupied, and whether that is a repair.

    A routeless seat (freed by remove_assignment) simply takes the student's
    route; only a seat attached to a different route counts as a repair.
    """
    repaired = seat.route_id is not None and seat.route_id != student.route_id
    return student.route_id, repaired


def check_removable(
    seat: SeatLike | None, seat_id: UUID,
) -> ConflictError | None:
    """Only an existing, occupied seat can be freed."""
    if seat is None or not seat.is_occupied:
        return ConflictError(SEAT_NOT_OCCUPIED, ErrorContext(seat_id=str(seat_id)))
    return None
