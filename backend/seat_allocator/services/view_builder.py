"""Query/View Builder - loads current state and assembles presentation views.

Invariants:
    - Read-only: never writes, never commits
    - Every call recomputes from storage; nothing is cached between calls
    - Each collection is loaded at most once per call, then joined in memory
      through the pure builders in core/views.py
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocator.core.domain_types import RouteId
from seat_allocator.core.invariants import find_violations
from seat_allocator.core.repository_protocols import SeatStoreContract
from seat_allocator.core.views import (
    build_route_view, build_route_views, build_seat_view, build_student_view,
    index_by_id, index_by_student,
)
from seat_allocator.infrastructure.database import storage_guard
from seat_allocator.models.route import Route
from seat_allocator.models.student import Student
from seat_allocator.services.route_registry import RouteRegistry
from seat_allocator.services.seat_store import SeatStore
from seat_allocator.services.student_registry import StudentRegistry


def _seat_sort_key(view: dict) -> tuple:
    """Unrouted seats last; same-named routes stay grouped by route id."""
    route_name = view["route"]["name"] if view["route"]["id"] else None
    return (
        route_name is None, route_name or "", view["routeId"] or "",
        view["seatNumber"],
    )


class ViewBuilder:
    """Denormalized reads for the API layer."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.seats: SeatStoreContract = SeatStore(db)

    async def _all(self, model) -> list:
        result = await self.db.execute(select(model))
        return list(result.scalars().all())

    async def seat_views(self, route_id: RouteId | None = None) -> list[dict]:
        """All seats (optionally one route's) with student and route resolved."""
        async with storage_guard(self.db, "list_seats"):
            seats = (
                await self.seats.find_by_route(route_id)
                if route_id is not None else await self.seats.find_all()
            )
            students = index_by_id(await self._all(Student))
            routes = index_by_id(await self._all(Route))
        views = [build_seat_view(s, students, routes) for s in seats]
        return sorted(views, key=_seat_sort_key)

    async def student_views(self) -> list[dict]:
        """All students with route and current seat resolved."""
        students = await StudentRegistry(self.db).list_students()
        async with storage_guard(self.db, "list_students"):
            routes = index_by_id(await self._all(Route))
            by_student = index_by_student(await self.seats.find_all())
        return [build_student_view(s, routes, by_student) for s in students]

    async def route_views(self) -> list[dict]:
        """All routes with assigned/total seat counts."""
        routes = await RouteRegistry(self.db).list_routes()
        async with storage_guard(self.db, "list_routes"):
            seats = await self.seats.find_all()
        return build_route_views(routes, seats)

    async def route_detail(self, route_id: RouteId) -> dict:
        """One route with counts and its seats. Raises NotFoundError."""
        route = await RouteRegistry(self.db).get_route_or_raise(route_id)
        async with storage_guard(self.db, "get_route"):
            seats = await self.seats.find_by_route(route_id)
            students = index_by_id(await self._all(Student))
        view = build_route_view(route, seats)
        view["seats"] = [
            build_seat_view(s, students, {route.id: route}) for s in seats
        ]
        return view

    async def audit(self) -> dict:
        """Occupancy consistency audit over current storage."""
        async with storage_guard(self.db, "audit"):
            seats = await self.seats.find_all()
            students = index_by_id(await self._all(Student))
        violations = find_violations(seats, students)
        return {"consistent": not violations, "violations": violations}
