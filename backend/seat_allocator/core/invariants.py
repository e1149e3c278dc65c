"""Consistency Audit - detects occupancy invariant violations in a snapshot.

Invariants:
    - PURE: inspects the records it is given, never repairs them
    - Checks one seat per student, studentId iff occupied, and that an
      occupied seat carries its student's route
    - Returns a list of human-readable violations; empty list means consistent
"""

from collections import Counter
from typing import Iterable, Mapping
from uuid import UUID

from seat_allocator.core.repository_protocols import SeatLike, StudentLike


def find_violations(
    seats: Iterable[SeatLike], students: Mapping[UUID, StudentLike],
) -> list[str]:
    """Audit seats against the students they reference."""
    seats = list(seats)
    violations: list[str] = []

    per_student = Counter(s.student_id for s in seats if s.student_id is not None)
    for student_id, count in per_student.items():
        if count > 1:
            violations.append(f"student {student_id} occupies {count} seats")

    for seat in seats:
        if (seat.student_id is not None) != seat.is_occupied:
            violations.append(
                f"seat {seat.id} has is_occupied={seat.is_occupied} "
                f"but student_id={seat.student_id}",
            )
        if not seat.is_occupied or seat.student_id is None:
            continue
        student = students.get(seat.student_id)
        if student is not None and student.route_id != seat.route_id:
            violations.append(
                f"seat {seat.id} is on route {seat.route_id} but its student "
                f"rides route {student.route_id}",
            )
    return violations
