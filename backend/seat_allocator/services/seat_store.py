"""Seat Store - data access for seat records, no business rules.

Invariants:
    - Every read bypasses the identity map (populate_existing): callers always see
      the committed/flushed row, never a stale cached object
    - claim() and release() are conditional updates; they report whether the row
      was still in the expected state (compare-and-swap)
    - bulk_reset_occupancy() never touches route_id
    - The store never commits; the calling service owns the transaction

Design Decisions:
    - Bulk UPDATE with synchronize_session=False: rowcount is the CAS result, and
      the next read refreshes any loaded instance anyway
"""

from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocator.core.domain_types import RouteId, SeatId, StudentId
from seat_allocator.models.seat import Seat


class SeatStore:
    """Seat persistence bound to one AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _scalars(self, query) -> Sequence[Seat]:
        result = await self.db.execute(
            query.execution_options(populate_existing=True),
        )
        return result.scalars().all()

    async def find_all(self) -> Sequence[Seat]:
        return await self._scalars(
            select(Seat).order_by(Seat.route_id, Seat.seat_number),
        )

    async def find_by_route(self, route_id: RouteId) -> Sequence[Seat]:
        return await self._scalars(
            select(Seat)
            .where(Seat.route_id == route_id)
            .order_by(Seat.seat_number),
        )

    async def find_by_id(self, seat_id: SeatId) -> Seat | None:
        seats = await self._scalars(select(Seat).where(Seat.id == seat_id))
        return seats[0] if seats else None

    async def find_by_student(self, student_id: StudentId) -> Seat | None:
        seats = await self._scalars(
            select(Seat).where(Seat.student_id == student_id),
        )
        return seats[0] if seats else None

    async def insert_batch(self, route_id: RouteId, seat_numbers: list[int]) -> int:
        """Stage free seats for a route; flushed with the caller's transaction."""
        self.db.add_all([
            Seat(
                seat_number=number, is_occupied=False,
                route_id=route_id, student_id=None,
            )
            for number in seat_numbers
        ])
        await self.db.flush()
        return len(seat_numbers)

    async def claim(
        self, seat_id: SeatId, student_id: StudentId, route_id: RouteId | None,
    ) -> bool:
        """Occupy the seat only if it is still free."""
        result = await self.db.execute(
            update(Seat)
            .where(Seat.id == seat_id)
            .where(Seat.is_occupied.is_(False))
            .values(
                is_occupied=True,
                student_id=student_id,
                route_id=route_id,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False),
        )
        return result.rowcount == 1

    async def release(self, seat_id: SeatId, clear_route: bool) -> bool:
        """Free the seat only if it is still occupied."""
        values = {
            "is_occupied": False,
            "student_id": None,
            "updated_at": datetime.now(timezone.utc),
        }
        if clear_route:
            values["route_id"] = None
        result = await self.db.execute(
            update(Seat)
            .where(Seat.id == seat_id)
            .where(Seat.is_occupied.is_(True))
            .values(**values)
            .execution_options(synchronize_session=False),
        )
        return result.rowcount == 1

    async def bulk_reset_occupancy(self, route_id: RouteId | None = None) -> int:
        """Free every seat (or every seat on one route). Returns rows touched."""
        query = update(Seat).values(
            is_occupied=False,
            student_id=None,
            updated_at=datetime.now(timezone.utc),
        )
        if route_id is not None:
            query = query.where(Seat.route_id == route_id)
        result = await self.db.execute(
            query.execution_options(synchronize_session=False),
        )
        return result.rowcount
