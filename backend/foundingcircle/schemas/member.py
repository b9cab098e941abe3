"""Member Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - JoinRequest.email and ValidateCodeRequest.email are stripped, lowercased, and
      must contain "@"
    - BulkApproveRequest.count >= 1
    - MemberStatusResponse exposes access_code only while status is "approved"

Design Decisions:
    - field_validator for side-effect-free transforms (strip/lower) — keeps models pure
    - from_member() classmethods keep core dataclass -> wire mapping in one place
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from foundingcircle.core.domain_types import (
    ActivationResult, JoinResult, Member, MemberStatus, WaitlistStats,
)


def _clean_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v:
        raise ValueError("Valid email is required")
    return v


# --- Public ------------------------------------------------------------------

class JoinRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    referral_source: str | None = Field(None, max_length=100)

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return _clean_email(v)


class JoinResponse(BaseModel):
    queue_number: int
    access_code: str | None
    message: str

    @classmethod
    def from_result(cls, result: JoinResult) -> "JoinResponse":
        return cls(
            queue_number=result.queue_number,
            access_code=result.access_code,
            message=result.message,
        )


class MemberStatusResponse(BaseModel):
    """Public view of a waitlist position."""
    queue_number: int
    status: MemberStatus
    signed_up_at: datetime
    access_code: str | None = None

    @classmethod
    def from_member(cls, member: Member) -> "MemberStatusResponse":
        return cls(
            queue_number=member.queue_number,
            status=member.status,
            signed_up_at=member.signed_up_at,
            access_code=(
                member.access_code if member.status == MemberStatus.APPROVED else None
            ),
        )


class ValidateCodeRequest(BaseModel):
    access_code: str = Field(min_length=1, max_length=64)
    email: str = Field(min_length=3, max_length=320)

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return _clean_email(v)


class ActivationResponse(BaseModel):
    valid: bool
    email: str | None = None
    queue_number: int | None = None

    @classmethod
    def from_result(cls, result: ActivationResult) -> "ActivationResponse":
        return cls(
            valid=result.valid, email=result.email, queue_number=result.queue_number,
        )


# --- Admin -------------------------------------------------------------------

class MemberResponse(BaseModel):
    """Full member record for admin views."""
    id: UUID
    email: str
    queue_number: int
    access_code: str | None
    status: MemberStatus
    signed_up_at: datetime
    approved_at: datetime | None
    activated_at: datetime | None
    metadata: dict[str, Any]

    @classmethod
    def from_member(cls, member: Member) -> "MemberResponse":
        return cls(
            id=member.id,
            email=member.email,
            queue_number=member.queue_number,
            access_code=member.access_code,
            status=member.status,
            signed_up_at=member.signed_up_at,
            approved_at=member.approved_at,
            activated_at=member.activated_at,
            metadata=member.metadata,
        )


class MemberListResponse(BaseModel):
    total: int
    members: list[MemberResponse]


class ApproveResponse(BaseModel):
    message: str
    member: MemberResponse


class BulkApproveRequest(BaseModel):
    count: int = Field(ge=1, le=10_000)


class BulkApproveResponse(BaseModel):
    message: str
    members: list[MemberResponse]


class StatsResponse(BaseModel):
    total: int
    pending: int
    approved: int
    activated: int
    remaining_slots: int

    @classmethod
    def from_stats(cls, stats: WaitlistStats) -> "StatsResponse":
        return cls(
            total=stats.total,
            pending=stats.pending,
            approved=stats.approved,
            activated=stats.activated,
            remaining_slots=stats.remaining_slots,
        )


class MessageResponse(BaseModel):
    message: str
