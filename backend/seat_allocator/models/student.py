"""Student ORM - a rider bound to exactly one route at creation.

Invariants:
    - name and grade are non-empty
    - route_id set at creation and never changed
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from seat_allocator.db.base import Base


class Student(Base):
    """Student entity."""
    __tablename__ = "students"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    grade: Mapped[str] = mapped_column(String(50), nullable=False)
    route_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("routes.id"), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
