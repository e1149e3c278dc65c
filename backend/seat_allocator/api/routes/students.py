"""Students - register students on a route and list them with their seats.

Invariants:
    - Unknown routeId answers 400 (NotFoundError), like any other bad input
    - GET list answers 500 with [] on storage failure
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocator.api.routes.read_helpers import list_or_empty
from seat_allocator.core.domain_types import RouteId
from seat_allocator.infrastructure.auth import require_caller
from seat_allocator.infrastructure.database import get_db
from seat_allocator.schemas.student import StudentCreate
from seat_allocator.services.student_registry import StudentRegistry
from seat_allocator.services.view_builder import ViewBuilder

router = APIRouter(
    prefix="/api/v1/students", tags=["students"],
    dependencies=[Depends(require_caller)],
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_student(body: StudentCreate, db: AsyncSession = Depends(get_db)):
    """Add a student; the response carries the resolved route."""
    return await StudentRegistry(db).create_student(
        body.name, body.grade, RouteId(body.route_id),
    )


@router.get("")
async def list_students(db: AsyncSession = Depends(get_db)):
    """All students with route and current seat."""
    return await list_or_empty(ViewBuilder(db).student_views(), "students")
