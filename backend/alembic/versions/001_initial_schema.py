"""Initial schema - routes, students, seats.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "routes",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("capacity > 0", name="ck_routes_capacity_positive"),
    )

    op.create_table(
        "students",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("grade", sa.String(50), nullable=False),
        sa.Column("route_id", sa.Uuid, sa.ForeignKey("routes.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_students_route_id", "students", ["route_id"])

    op.create_table(
        "seats",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("seat_number", sa.Integer, nullable=False),
        sa.Column("is_occupied", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("route_id", sa.Uuid, sa.ForeignKey("routes.id"), nullable=True),
        sa.Column("student_id", sa.Uuid, sa.ForeignKey("students.id"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("student_id", name="uq_seats_student_id"),
    )
    op.create_index("ix_seats_route_id", "seats", ["route_id"])


def downgrade() -> None:
    op.drop_index("ix_seats_route_id", table_name="seats")
    op.drop_table("seats")
    op.drop_index("ix_students_route_id", table_name="students")
    op.drop_table("students")
    op.drop_table("routes")
