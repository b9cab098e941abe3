"""Capacity & Stats — pure arithmetic over member statuses and queue positions.

Invariants:
    - Capacity never gates admission; it only shapes the join message and remaining_slots
    - remaining_slots = max(0, capacity - activated)
    - compute_waitlist_stats never raises on empty input

Design Decisions:
    - Pure functions over a status list, not a store query: the store scan has no
      ordering requirement and this keeps the counting testable without IO
"""

from collections import Counter
from collections.abc import Iterable

from foundingcircle.core.domain_types import MemberStatus, WaitlistStats


MAX_FOUNDING_MEMBERS: int = 150


def is_within_capacity(queue_number: int, capacity: int = MAX_FOUNDING_MEMBERS) -> bool:
    return queue_number <= capacity


def compose_join_message(
    queue_number: int, access_code: str | None, capacity: int = MAX_FOUNDING_MEMBERS,
) -> str:
    """Message for a freshly admitted applicant."""
    if is_within_capacity(queue_number, capacity):
        return (
            f"Welcome to the Founding Circle! You're #{queue_number} in line. "
            f"Your access code is {access_code}"
        )
    return (
        f"You're on the waitlist at position #{queue_number}. "
        "We'll notify you when spots open up."
    )


def compose_existing_message(queue_number: int) -> str:
    return f"You're already on the waitlist at position #{queue_number}"


def compute_waitlist_stats(
    statuses: Iterable[MemberStatus], capacity: int = MAX_FOUNDING_MEMBERS,
) -> WaitlistStats:
    """Aggregate counts per status plus remaining activation slots."""
    counts = Counter(MemberStatus(s) for s in statuses)
    activated = counts[MemberStatus.ACTIVATED]
    return WaitlistStats(
        total=sum(counts.values()),
        pending=counts[MemberStatus.PENDING],
        approved=counts[MemberStatus.APPROVED],
        activated=activated,
        remaining_slots=max(0, capacity - activated),
    )
