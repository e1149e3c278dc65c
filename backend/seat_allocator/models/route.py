"""Route ORM - a transportation route with a fixed seat capacity.

Invariants:
    - id is UUID primary key (client-side default)
    - name is non-empty, capacity > 0 (enforced by core/enforce_registry.py)
    - capacity is immutable after creation; routes are never deleted
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from seat_allocator.db.base import Base


class Route(Base):
    """Route entity - owns the seats provisioned for it."""
    __tablename__ = "routes"
    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_routes_capacity_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
