"""Registry Enforcement - input validation for route and student creation.

Invariants:
    - PURE: no IO; returns ValidationError or None
    - Names and grades are judged after stripping whitespace
    - plan_seat_numbers(capacity) == [1..capacity]
    - Capacity is bounded by MAX_ROUTE_CAPACITY so one request cannot
      provision an unbounded seat batch
"""

from uuid import UUID

from seat_allocator.core.errors import ValidationError

MAX_ROUTE_CAPACITY = 500


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_route_input(name: object, capacity: object) -> ValidationError | None:
    """Route needs a non-empty name and a positive integer capacity up to MAX_ROUTE_CAPACITY."""
    if _is_blank(name):
        return ValidationError("Route name is required", "name")
    # bool is an int subclass; True must not pass as capacity 1
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        return ValidationError("Capacity must be an integer", "capacity")
    if capacity <= 0:
        return ValidationError("Capacity must be greater than 0", "capacity")
    if capacity > MAX_ROUTE_CAPACITY:
        return ValidationError(
            f"Capacity must not exceed {MAX_ROUTE_CAPACITY}", "capacity",
        )
    return None


def validate_student_input(
    name: object, grade: object, route_id: UUID | None,
) -> ValidationError | None:
    """Student needs name, grade and a route reference."""
    if _is_blank(name):
        return ValidationError("Student name is required", "name")
    if _is_blank(grade):
        return ValidationError("Grade is required", "grade")
    if route_id is None:
        return ValidationError("Route is required", "routeId")
    return None


def plan_seat_numbers(capacity: int) -> list[int]:
    """Sequential seat numbers for a freshly created route."""
    return list(range(1, capacity + 1))
