"""Boundary Protocols - contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Record protocols describe the attributes core reads, not ORM classes
    - SeatStoreContract is the data-access surface the assignment engine relies on

Design Decisions:
    - Protocols, so ORM rows and plain test doubles both satisfy them
    - Async in the store Protocol: implementations do IO, the pure rules that
      consume the records they return are never async
"""

from typing import Protocol, Sequence
from uuid import UUID

from seat_allocator.core.domain_types import RouteId, SeatId, StudentId


class RouteLike(Protocol):
    """Structural contract for a route record."""
    id: UUID
    name: str
    capacity: int


class SeatLike(Protocol):
    """Structural contract for a seat record."""
    id: UUID
    seat_number: int
    is_occupied: bool
    route_id: UUID | None
    student_id: UUID | None


class StudentLike(Protocol):
    """Structural contract for a student record."""
    id: UUID
    name: str
    grade: str
    route_id: UUID | None


class SeatStoreContract(Protocol):
    """Seat data access. No business rules live behind this contract."""
    async def find_all(self) -> Sequence[SeatLike]: ...
    async def find_by_route(self, route_id: RouteId) -> Sequence[SeatLike]: ...
    async def find_by_id(self, seat_id: SeatId) -> SeatLike | None: ...
    async def find_by_student(self, student_id: StudentId) -> SeatLike | None: ...
    async def claim(
        self, seat_id: SeatId, student_id: StudentId, route_id: RouteId | None,
    ) -> bool: ...
    async def release(self, seat_id: SeatId, clear_route: bool) -> bool: ...
    async def bulk_reset_occupancy(self, route_id: RouteId | None = None) -> int: ...
