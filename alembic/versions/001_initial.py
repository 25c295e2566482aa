"""Initial tables: users, competencies, progress, admins.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(120), nullable=False),
        sa.Column("last_name", sa.String(120), nullable=False),
        sa.Column("cohort", sa.String(120), nullable=True),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("role", sa.String(64), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "competencies",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("category", sa.String(120), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("reference_code", sa.Text(), nullable=True),
        sa.Column("what", sa.Text(), nullable=True),
        sa.Column("looks_like", sa.Text(), nullable=True),
        sa.Column("critical", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_competencies_category"), "competencies", ["category"], unique=False)

    op.create_table(
        "progress",
        sa.Column("id", sa.String(320), nullable=False),
        sa.Column("apprentice_email", sa.String(255), nullable=False),
        sa.Column("competency_id", sa.String(32), nullable=False),
        sa.Column("self_rating", sa.Integer(), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("viewed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("handoff_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("date_validated", sa.DateTime(timezone=True), nullable=True),
        sa.Column("mentor_name", sa.String(255), nullable=True),
        sa.Column("signature", sa.Text(), nullable=True),
        sa.Column("comments", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_progress_apprentice_email"), "progress", ["apprentice_email"], unique=False)
    op.create_index(op.f("ix_progress_competency_id"), "progress", ["competency_id"], unique=False)

    op.create_table(
        "admins",
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("builtin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("email"),
    )


def downgrade() -> None:
    op.drop_table("admins")
    op.drop_index(op.f("ix_progress_competency_id"), table_name="progress")
    op.drop_index(op.f("ix_progress_apprentice_email"), table_name="progress")
    op.drop_table("progress")
    op.drop_index(op.f("ix_competencies_category"), table_name="competencies")
    op.drop_table("competencies")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
