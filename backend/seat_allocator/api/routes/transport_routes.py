"""Transport Routes - create routes with their seats, list routes with counts.

Invariants:
    - POST provisions exactly `capacity` seats in the same transaction as the route
    - GET list answers 500 with [] on storage failure
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocator.api.routes.read_helpers import list_or_empty
from seat_allocator.core.domain_types import RouteId
from seat_allocator.infrastructure.auth import require_caller
from seat_allocator.infrastructure.database import get_db
from seat_allocator.schemas.route import RouteCreate, RouteCreated
from seat_allocator.services.route_registry import RouteRegistry
from seat_allocator.services.view_builder import ViewBuilder

router = APIRouter(
    prefix="/api/v1/routes", tags=["routes"],
    dependencies=[Depends(require_caller)],
)


@router.post(
    "", response_model=RouteCreated, status_code=status.HTTP_201_CREATED,
)
async def create_route(body: RouteCreate, db: AsyncSession = Depends(get_db)):
    """Create a route and generate its numbered seats."""
    route, seats_created = await RouteRegistry(db).create_route(
        body.name, body.capacity,
    )
    return RouteCreated(route_id=route.id, seats_created=seats_created)


@router.get("")
async def list_routes(db: AsyncSession = Depends(get_db)):
    """All routes with assigned/free seat counts."""
    return await list_or_empty(ViewBuilder(db).route_views(), "routes")


@router.get("/{route_id}")
async def get_route(route_id: UUID, db: AsyncSession = Depends(get_db)):
    """One route with counts and its seats."""
    return await ViewBuilder(db).route_detail(RouteId(route_id))
