"""Seats - list, assign, remove, reset and audit seat occupancy.

Invariants:
    - Precondition failures on assign/remove answer 400 with the reason string
    - Reset keeps every seat's route; remove clears it unless configured otherwise
    - GET list answers 500 with [] on storage failure
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocator.api.routes.read_helpers import list_or_empty
from seat_allocator.config import Settings, get_settings
from seat_allocator.core.domain_types import RouteId, SeatId, StudentId
from seat_allocator.infrastructure.auth import require_caller
from seat_allocator.infrastructure.database import get_db
from seat_allocator.schemas.base import SuccessResponse
from seat_allocator.schemas.seat import (
    AuditReport, SeatAssign, SeatAssigned, SeatRemove, SeatReset, SeatsReset,
)
from seat_allocator.services.assignment_engine import AssignmentEngine
from seat_allocator.services.view_builder import ViewBuilder

router = APIRouter(
    prefix="/api/v1/seats", tags=["seats"],
    dependencies=[Depends(require_caller)],
)


def _engine(db: AsyncSession, settings: Settings) -> AssignmentEngine:
    return AssignmentEngine(db, clear_route_on_remove=settings.remove_clears_route)


@router.get("")
async def list_seats(
    route_id: UUID | None = Query(None, alias="routeId"),
    db: AsyncSession = Depends(get_db),
):
    """All seats with student and route resolved, optionally for one route."""
    return await list_or_empty(ViewBuilder(db).seat_views(
        RouteId(route_id) if route_id else None,
    ), "seats")


@router.get("/audit", response_model=AuditReport)
async def audit_seats(db: AsyncSession = Depends(get_db)):
    """Report occupancy invariant violations, if any."""
    return await ViewBuilder(db).audit()


@router.post("/assign", response_model=SeatAssigned)
async def assign_seat(
    body: SeatAssign,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    seat = await _engine(db, settings).assign_seat(
        SeatId(body.seat_id), StudentId(body.student_id),
    )
    return SeatAssigned(seat=seat)


@router.post("/remove", response_model=SuccessResponse)
async def remove_assignment(
    body: SeatRemove,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    await _engine(db, settings).remove_assignment(SeatId(body.seat_id))
    return SuccessResponse()


@router.post("/reset", response_model=SeatsReset)
async def reset_seats(
    body: SeatReset | None = None,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Free every seat (or one route's seats); routes stay attached."""
    route_id = RouteId(body.route_id) if body and body.route_id else None
    count = await _engine(db, settings).reset_all(route_id)
    return SeatsReset(seats_reset=count)
