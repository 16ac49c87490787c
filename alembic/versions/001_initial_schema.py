"""initial_schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the admins table used by sign-in and the session lifecycle.
Demo admins are seeded by scripts/seed_data.py.
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the admins table."""
    op.create_table(
        "admins",
        sa.Column("id", sa.UUID(as_uuid=False), nullable=False),
        sa.Column("username", sa.String(25), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="instructor"),
        sa.Column("permission", sa.String(30), nullable=False, server_default="view_students"),
        sa.Column("status", sa.String(20), nullable=False, server_default="unverified"),
        sa.Column("refresh_token", sa.String(1024), nullable=True),
        sa.Column(
            "last_login",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_admins_username", "admins", ["username"], unique=True)
    op.create_index("ix_admins_email", "admins", ["email"], unique=True)
    op.create_index("ix_admins_phone", "admins", ["phone"], unique=True)
    op.create_index("idx_admin_role", "admins", ["role"])
    op.create_index("idx_admin_status", "admins", ["status"])
    op.create_index("idx_admin_refresh_token", "admins", ["refresh_token"])


def downgrade() -> None:
    op.drop_table("admins")
