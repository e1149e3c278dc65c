"""Student Schemas - student creation request."""

from uuid import UUID

from pydantic import Field, field_validator

from seat_allocator.schemas.base import CamelModel


class StudentCreate(CamelModel):
    """Student creation - name, grade and the route the student rides."""
    name: str = Field(min_length=1, max_length=200)
    grade: str = Field(min_length=1, max_length=50)
    route_id: UUID

    @field_validator("name", "grade")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("value cannot be empty or whitespace")
        return v
