"""Domain Types — the Member entity and the value objects returned by core operations.

Invariants:
    - MemberId wraps UUID — never use bare UUID in domain logic
    - MemberStatus is the only status vocabulary; values match the DB `status` column
    - Member is a plain dataclass: stores hand out copies, never live rows

Design Decisions:
    - NewType over wrapper classes: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - Result types (JoinResult, ActivationResult, WaitlistStats) are frozen: they are
      snapshots handed to the HTTP layer, not state
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

MemberId = NewType("MemberId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class MemberStatus(str, Enum):
    """Member lifecycle states — pending -> approved -> activated, forward only."""
    PENDING = "pending"
    APPROVED = "approved"
    ACTIVATED = "activated"


class ActivationFailure(str, Enum):
    """Sub-reasons for a rejected activation attempt."""
    NOT_FOUND = "not_found"
    NOT_YET_APPROVED = "not_yet_approved"
    NOT_ACTIVATABLE = "not_activatable"


def normalize_email(raw: str) -> str:
    """Emails compare case-insensitively; store and look up the lowercase form."""
    return raw.strip().lower()


# ─── Entity ──────────────────────────────────────────────────────

@dataclass
class Member:
    """One waitlist applicant, keyed by normalised email."""
    id: MemberId
    email: str
    queue_number: int
    status: MemberStatus
    signed_up_at: datetime
    access_code: str | None = None
    approved_at: datetime | None = None
    activated_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


# ─── Results ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class JoinResult:
    queue_number: int
    access_code: str | None
    message: str
    created: bool


@dataclass(frozen=True)
class ActivationResult:
    valid: bool
    email: str | None = None
    queue_number: int | None = None


@dataclass(frozen=True)
class WaitlistStats:
    total: int
    pending: int
    approved: int
    activated: int
    remaining_slots: int
