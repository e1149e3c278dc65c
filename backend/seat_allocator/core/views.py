"""View Builders - denormalized, presentation-ready dicts from raw records.

Invariants:
    - PURE and read-only: records in, plain JSON-able dicts out, nothing mutated
    - Dangling references never raise; they resolve to explicit placeholders
    - Keys are camelCase (wire format), identities rendered as strings

Design Decisions:
    - Lookups passed in as dicts keyed by UUID: the shell loads each collection
      once per request, the builders never query
"""

from collections import defaultdict
from typing import Iterable, Mapping
from uuid import UUID

from seat_allocator.core.domain_types import SeatState
from seat_allocator.core.repository_protocols import (
    RouteLike, SeatLike, StudentLike,
)


UNASSIGNED_ROUTE_NAME = "Unassigned"
UNKNOWN_ROUTE_NAME = "Unknown route"
UNKNOWN_STUDENT_NAME = "Unknown student"


def _str_or_none(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


def route_ref(route: RouteLike | None, route_id: UUID | None) -> dict:
    """Resolved route, or a placeholder when missing."""
    if route is not None:
        return {"id": str(route.id), "name": route.name, "capacity": route.capacity}
    if route_id is None:
        return {"id": None, "name": UNASSIGNED_ROUTE_NAME, "capacity": None}
    return {"id": str(route_id), "name": UNKNOWN_ROUTE_NAME, "capacity": None}


def student_ref(student: StudentLike | None, student_id: UUID | None) -> dict | None:
    """Resolved student; None for a free seat, placeholder for a dangling id."""
    if student_id is None:
        return None
    if student is None:
        return {"id": str(student_id), "name": UNKNOWN_STUDENT_NAME, "grade": None}
    return {"id": str(student.id), "name": student.name, "grade": student.grade}


def build_seat_view(
    seat: SeatLike,
    students: Mapping[UUID, StudentLike],
    routes: Mapping[UUID, RouteLike],
) -> dict:
    """Seat with its student and route resolved."""
    student = students.get(seat.student_id) if seat.student_id else None
    route = routes.get(seat.route_id) if seat.route_id else None
    return {
        "id": str(seat.id),
        "seatNumber": seat.seat_number,
        "isOccupied": seat.is_occupied,
        "state": (SeatState.OCCUPIED if seat.is_occupied else SeatState.FREE).value,
        "routeId": _str_or_none(seat.route_id),
        "studentId": _str_or_none(seat.student_id),
        "route": route_ref(route, seat.route_id),
        "student": student_ref(student, seat.student_id),
    }


def build_student_view(
    student: StudentLike,
    routes: Mapping[UUID, RouteLike],
    seats_by_student: Mapping[UUID, SeatLike],
) -> dict:
    """Student with route and current seat resolved."""
    route = routes.get(student.route_id) if student.route_id else None
    seat = seats_by_student.get(student.id)
    return {
        "id": str(student.id),
        "name": student.name,
        "grade": student.grade,
        "routeId": _str_or_none(student.route_id),
        "route": route_ref(route, student.route_id),
        "seat": (
            {"id": str(seat.id), "seatNumber": seat.seat_number}
            if seat is not None else None
        ),
    }


def build_route_view(route: RouteLike, seats: Iterable[SeatLike]) -> dict:
    """Route with assigned/total counts over the seats currently on it."""
    seats = list(seats)
    assigned = sum(1 for s in seats if s.is_occupied)
    return {
        "id": str(route.id),
        "name": route.name,
        "capacity": route.capacity,
        "totalSeats": len(seats),
        "assignedSeats": assigned,
        "freeSeats": len(seats) - assigned,
    }


def build_route_views(
    routes: Iterable[RouteLike], seats: Iterable[SeatLike],
) -> list[dict]:
    """Route views for every route, seats grouped in one pass."""
    by_route: dict[UUID, list[SeatLike]] = defaultdict(list)
    for seat in seats:
        if seat.route_id is not None:
            by_route[seat.route_id].append(seat)
    return [build_route_view(r, by_route.get(r.id, [])) for r in routes]


def index_by_id(records: Iterable) -> dict:
    """{record.id: record} lookup table."""
    return {r.id: r for r in records}


def index_by_student(seats: Iterable[SeatLike]) -> dict[UUID, SeatLike]:
    """{student_id: seat} for occupied seats."""
    return {s.student_id: s for s in seats if s.student_id is not None}
