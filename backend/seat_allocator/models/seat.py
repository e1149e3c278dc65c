"""Seat ORM - one numbered slot on a route, free or occupied.

Invariants:
    - seat_number assigned 1..capacity at route creation, never changed
    - student_id is non-null iff is_occupied, maintained by the assignment engine
    - student_id is UNIQUE: a student can hold at most one seat
    - route_id is nullable: removing an assignment may clear it

Design Decisions:
    - No (route_id, seat_number) unique constraint: the assignment repair can move
      a seat onto another route that already has the same number
    - Indexes on route_id and student_id back the by-route and by-student lookups
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from seat_allocator.db.base import Base


class Seat(Base):
    """Seat entity - mutable only through the assignment engine."""
    __tablename__ = "seats"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)
    is_occupied: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    route_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("routes.id"), nullable=True, index=True,
    )
    student_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("students.id"), nullable=True, unique=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
