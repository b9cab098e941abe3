"""Founding Member ORM — one row per waitlist applicant.

Invariants:
    - id is UUID primary key (client-side default)
    - email is stored lowercase and is unique
    - queue_number is unique and dense (1..N); only the store adapter writes it
    - status is one of pending / approved / activated (CHECK constraint)
    - approved_at / activated_at are set exactly once, at the matching transition

Design Decisions:
    - JSON column for metadata: free-form annotations (referral source) never queried
    - Python attribute member_metadata mapped to column "metadata": the name
      `metadata` is reserved on declarative classes
    - Composite index (access_code, email): activation looks both up together
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from foundingcircle.db.base import Base


class FoundingMember(Base):
    """Founding Circle waitlist member."""
    __tablename__ = "founding_members"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'activated')",
            name="ck_founding_members_status",
        ),
        Index("ix_founding_members_code_email", "access_code", "email"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True,
    )
    queue_number: Mapped[int] = mapped_column(
        Integer, nullable=False, unique=True,
    )
    access_code: Mapped[str | None] = mapped_column(
        String(32), nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True,
    )
    signed_up_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    activated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    member_metadata: Mapped[dict] = mapped_column(
        "metadata", JSON, nullable=False, default=dict,
    )
