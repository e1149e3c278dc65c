"""Route Schemas - route creation request and confirmation.

Invariants:
    - RouteCreate.name: 1-200 chars after strip
    - RouteCreate.capacity: integer in 1..MAX_ROUTE_CAPACITY
"""

from uuid import UUID

from pydantic import Field, field_validator

from seat_allocator.core.enforce_registry import MAX_ROUTE_CAPACITY
from seat_allocator.schemas.base import CamelModel


class RouteCreate(CamelModel):
    """Route creation - validates name and capacity."""
    name: str = Field(min_length=1, max_length=200)
    capacity: int = Field(gt=0, le=MAX_ROUTE_CAPACITY)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class RouteCreated(CamelModel):
    """Confirmation returned after route + seat provisioning."""
    success: bool = True
    route_id: UUID
    seats_created: int
