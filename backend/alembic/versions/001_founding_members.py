"""Founding members and queue sequence.

Revision ID: 001_founding_members
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_founding_members"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "founding_members",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("queue_number", sa.Integer, nullable=False, unique=True),
        sa.Column("access_code", sa.String(32), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("signed_up_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("activated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("metadata", sa.JSON, nullable=False, server_default=sa.text("'{}'")),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'activated')",
            name="ck_founding_members_status",
        ),
    )
    op.create_index("ix_founding_members_status", "founding_members", ["status"])
    op.create_index(
        "ix_founding_members_code_email", "founding_members", ["access_code", "email"],
    )

    sequences = op.create_table(
        "queue_sequences",
        sa.Column("name", sa.String(64), primary_key=True),
        sa.Column("value", sa.Integer, nullable=False, server_default="0"),
    )
    op.bulk_insert(sequences, [{"name": "founding_members", "value": 0}])


def downgrade() -> None:
    op.drop_table("queue_sequences")
    op.drop_index("ix_founding_members_code_email", table_name="founding_members")
    op.drop_index("ix_founding_members_status", table_name="founding_members")
    op.drop_table("founding_members")
