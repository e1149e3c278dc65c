"""Student Registry - creates students bound to an existing route.

Invariants:
    - A student references exactly one existing route, fixed at creation
    - Creating a student never touches seats
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocator.core.domain_types import RouteId
from seat_allocator.core.enforce_registry import validate_student_input
from seat_allocator.core.errors import ErrorContext, NotFoundError
from seat_allocator.core.views import build_student_view
from seat_allocator.infrastructure.database import storage_guard
from seat_allocator.models.route import Route
from seat_allocator.models.student import Student
from seat_allocator.services.route_registry import ROUTE_NOT_FOUND

logger = logging.getLogger(__name__)


class StudentRegistry:
    """Student creation and lookup."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_student(
        self, name: str, grade: str, route_id: RouteId | None,
    ) -> dict:
        """Persist a student and return it with its route resolved."""
        error = validate_student_input(name, grade, route_id)
        if error:
            raise error

        async with storage_guard(self.db, "create_student"):
            route = await self.db.get(Route, route_id)
            if route is None:
                raise NotFoundError(
                    ROUTE_NOT_FOUND, ErrorContext(route_id=str(route_id)),
                )
            student = Student(name=name.strip(), grade=grade.strip(), route_id=route.id)
            self.db.add(student)
            await self.db.commit()

        logger.info(
            f"Student '{student.name}' added to route '{route.name}'",
            extra={"student_id": str(student.id), "route_id": str(route.id)},
        )
        return build_student_view(student, {route.id: route}, {})

    async def list_students(self) -> list[Student]:
        async with storage_guard(self.db, "list_students"):
            result = await self.db.execute(
                select(Student).order_by(Student.created_at, Student.name),
            )
            return list(result.scalars().all())
