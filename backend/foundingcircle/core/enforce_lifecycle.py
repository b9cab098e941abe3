"""Lifecycle Enforcement — forward-only status rules for approval and activation.

Invariants:
    - pending -> approved -> activated; no skips, no moves backward
    - check_approvable is NOT idempotent: re-approving rotates nothing, it raises
    - evaluate_activation IS idempotent: an activated member always re-validates
    - Both functions are pure: they decide, the service applies the mutation

Design Decisions:
    - Approval rejects already-approved members so a code a member may already be
      typing into the signup form is never silently rotated
    - Activation returns a decision instead of a bool so "already activated" and
      "activate now" stay distinguishable for logging
"""

from enum import Enum

from foundingcircle.core.domain_types import ActivationFailure, Member, MemberStatus
from foundingcircle.core.errors import (
    AccessCodeValidationError,
    ErrorContext,
    InvalidTransitionError,
)


ALLOWED_TRANSITIONS: dict[MemberStatus, frozenset[MemberStatus]] = {
    MemberStatus.PENDING: frozenset({MemberStatus.APPROVED}),
    MemberStatus.APPROVED: frozenset({MemberStatus.ACTIVATED}),
    MemberStatus.ACTIVATED: frozenset(),
}


class ActivationDecision(str, Enum):
    ACTIVATE = "activate"
    ALREADY_ACTIVATED = "already_activated"


def can_transition(current: MemberStatus, target: MemberStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def check_approvable(member: Member) -> None:
    """Raise InvalidTransitionError unless the member is still pending."""
    if not can_transition(member.status, MemberStatus.APPROVED):
        raise InvalidTransitionError(
            member.status.value,
            MemberStatus.APPROVED.value,
            ErrorContext(
                member_id=str(member.id), queue_number=member.queue_number,
            ),
        )


def evaluate_activation(member: Member) -> ActivationDecision:
    """Decide what presenting this member's credential should do."""
    if member.status == MemberStatus.ACTIVATED:
        return ActivationDecision.ALREADY_ACTIVATED
    if member.status == MemberStatus.APPROVED:
        return ActivationDecision.ACTIVATE

    ctx = ErrorContext(member_id=str(member.id), queue_number=member.queue_number)
    if member.status == MemberStatus.PENDING:
        raise AccessCodeValidationError(ActivationFailure.NOT_YET_APPROVED, ctx)
    raise AccessCodeValidationError(ActivationFailure.NOT_ACTIVATABLE, ctx)
