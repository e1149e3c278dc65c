"""Seat Schemas - assignment, removal and reset requests.

Invariants:
    - SeatAssign requires both seatId and studentId
    - SeatReset.routeId is optional: omitted means every seat
"""

from uuid import UUID

from seat_allocator.schemas.base import CamelModel


class SeatAssign(CamelModel):
    seat_id: UUID
    student_id: UUID


class SeatRemove(CamelModel):
    seat_id: UUID


class SeatReset(CamelModel):
    route_id: UUID | None = None


class SeatAssigned(CamelModel):
    """Assignment confirmation with the seat view (student and route resolved)."""
    success: bool = True
    seat: dict


class SeatsReset(CamelModel):
    success: bool = True
    seats_reset: int


class AuditReport(CamelModel):
    consistent: bool
    violations: list[str]
