"""Domain Types - identity and state types shared across the codebase.

Invariants:
    - RouteId, SeatId, StudentId wrap UUIDs; one canonical identity type per entity
    - SeatState is two-valued: a seat is FREE or OCCUPIED, nothing in between

Design Decisions:
    - Identities are NewType aliases of UUID
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

RouteId = NewType("RouteId", UUID)
SeatId = NewType("SeatId", UUID)
StudentId = NewType("StudentId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class SeatState(str, Enum):
    """Occupancy of a single seat."""
    FREE = "free"
    OCCUPIED = "occupied"


class LockKind(str, Enum):
    """Namespaces for in-process assignment locks."""
    SEAT = "seat"
    STUDENT = "student"


def lock_key(kind: LockKind, identity: UUID) -> str:
    """Stable lock key, e.g. 'seat:3f2a...'."""
    return f"{kind.value}:{identity}"
