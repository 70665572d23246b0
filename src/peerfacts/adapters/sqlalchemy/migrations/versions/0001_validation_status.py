"""Create validation_status table.

Revision ID: 0001_validation_status
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from peerfacts.adapters.sqlalchemy.tables import UTCDateTime

revision = "0001_validation_status"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "validation_status",
        sa.Column("logical_key", sa.String(length=64), nullable=False),
        sa.Column("is_override", sa.Boolean(), nullable=False),
        sa.Column("is_validated", sa.Boolean(), nullable=False),
        sa.Column("is_na", sa.Boolean(), nullable=False),
        sa.Column("is_flagged", sa.Boolean(), nullable=False),
        sa.Column("comments", sa.Text(), nullable=True),
        sa.Column("original_value", sa.Float(), nullable=False),
        sa.Column("current_value", sa.Float(), nullable=False),
        sa.Column("last_modified", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("logical_key", name=op.f("pk_validation_status")),
    )


def downgrade() -> None:
    op.drop_table("validation_status")
