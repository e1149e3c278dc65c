"""ORM Models - SQLAlchemy declarative models for routes, seats and students.

Invariants:
    - All models inherit from Base (db/base.py)
    - Cross-references: seat -> route, seat -> student, student -> route

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata knows every table before
      create_all or alembic autogenerate runs
"""

from seat_allocator.models.route import Route  # noqa: F401
from seat_allocator.models.student import Student  # noqa: F401
from seat_allocator.models.seat import Seat  # noqa: F401
