"""Route Registry - creates routes together with their full seat set.

Invariants:
    - A route and its `capacity` seats are written in ONE transaction: a reader
      sees either no route or the route with every seat numbered 1..capacity
    - Input is validated before any IO (core/enforce_registry.py)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocator.core.domain_types import RouteId
from seat_allocator.core.enforce_registry import (
    plan_seat_numbers, validate_route_input,
)
from seat_allocator.core.errors import ErrorContext, NotFoundError
from seat_allocator.infrastructure.database import storage_guard
from seat_allocator.models.route import Route
from seat_allocator.services.seat_store import SeatStore

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "route not found"


class RouteRegistry:
    """Route creation and lookup."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_route(self, name: str, capacity: int) -> tuple[Route, int]:
        """Persist the route and provision its seats. Returns (route, seats_created)."""
        error = validate_route_input(name, capacity)
        if error:
            raise error

        async with storage_guard(self.db, "create_route"):
            route = Route(name=name.strip(), capacity=capacity)
            self.db.add(route)
            await self.db.flush()
            seats_created = await SeatStore(self.db).insert_batch(
                route.id, plan_seat_numbers(capacity),
            )
            await self.db.commit()

        logger.info(
            f"Route '{route.name}' created with {seats_created} seats",
            extra={"route_id": str(route.id), "seats_created": seats_created},
        )
        return route, seats_created

    async def get_route(self, route_id: RouteId) -> Route | None:
        async with storage_guard(self.db, "get_route"):
            return await self.db.get(Route, route_id)

    async def get_route_or_raise(self, route_id: RouteId) -> Route:
        route = await self.get_route(route_id)
        if route is None:
            raise NotFoundError(ROUTE_NOT_FOUND, ErrorContext(route_id=str(route_id)))
        return route

    async def list_routes(self) -> list[Route]:
        async with storage_guard(self.db, "list_routes"):
            result = await self.db.execute(
                select(Route).order_by(Route.created_at, Route.name),
            )
            return list(result.scalars().all())
