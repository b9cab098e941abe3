"""Founding Circle Service — admission, approval, activation, stats, and removal.

Invariants:
    - Every operation re-reads the store; the service holds no member state
    - Queue numbers come only from MemberStore.insert_next (never count + 1 here)
    - Status moves only forward, through MemberStore.transition compare-and-set
    - Email delivery is dispatched after the store write succeeds and never
      affects the operation's result
    - Business outcomes are raised as typed FoundingCircleErrors; store faults
      propagate unchanged

Design Decisions:
    - Constructed once at startup and injected (FastAPI app.state), so store and
      notifier stay swappable in tests
    - approve_member is not idempotent but validate_and_activate is: re-approving
      would rotate a code the member may already be using
    - bulk_approve works from a fresh pending snapshot each call and the
      per-member compare-and-set makes a rerun after partial failure safe
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from foundingcircle.core.access_codes import (
    generate_access_code, is_well_formed, normalize_access_code,
)
from foundingcircle.core.capacity import (
    MAX_FOUNDING_MEMBERS,
    compose_existing_message,
    compose_join_message,
    compute_waitlist_stats,
)
from foundingcircle.core.domain_types import (
    ActivationResult,
    JoinResult,
    Member,
    MemberId,
    MemberStatus,
    WaitlistStats,
    normalize_email,
)
from foundingcircle.core.enforce_lifecycle import (
    ActivationDecision,
    check_approvable,
    evaluate_activation,
)
from foundingcircle.core.errors import (
    DuplicateKeyError,
    ErrorContext,
    FoundingCircleError,
    InvalidTransitionError,
    MemberNotFoundError,
)
from foundingcircle.core.repository_protocols import MemberStore
from foundingcircle.infrastructure.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FoundingCircleService:
    """Orchestrates the waitlist lifecycle against a MemberStore."""

    def __init__(
        self,
        store: MemberStore,
        notifications: NotificationDispatcher,
        capacity: int = MAX_FOUNDING_MEMBERS,
        code_generator: Callable[[], str] = generate_access_code,
    ):
        self._store = store
        self._notifications = notifications
        self._capacity = capacity
        self._generate_code = code_generator

    @property
    def capacity(self) -> int:
        return self._capacity

    # ── Admission ──────────────────────────────────────────────────

    async def join_waitlist(
        self, email: str, referral_source: str | None = None,
    ) -> JoinResult:
        """Admit an applicant, or return their existing position (idempotent)."""
        email = normalize_email(email)
        existing = await self._store.find_by_email(email)
        if existing:
            return self._existing_result(existing)

        access_code = self._generate_code()
        try:
            member = await self._store.insert_next(
                email, access_code, {"referralSource": referral_source or "direct"},
            )
        except DuplicateKeyError:
            # A concurrent join for the same email won the insert
            existing = await self._store.find_by_email(email)
            if existing is None:
                raise
            return self._existing_result(existing)

        logger.info(
            f"New member joined at position #{member.queue_number}",
            extra={"member_id": str(member.id), "queue_number": member.queue_number},
        )
        self._notifications.dispatch(member.email, access_code, member.queue_number)
        return JoinResult(
            queue_number=member.queue_number,
            access_code=access_code,
            message=compose_join_message(
                member.queue_number, access_code, self._capacity,
            ),
            created=True,
        )

    def _existing_result(self, member: Member) -> JoinResult:
        return JoinResult(
            queue_number=member.queue_number,
            access_code=member.access_code,
            message=compose_existing_message(member.queue_number),
            created=False,
        )

    # ── Lookup ─────────────────────────────────────────────────────

    async def get_status(self, email: str) -> Member | None:
        return await self._store.find_by_email(normalize_email(email))

    async def get_all_members(self) -> list[Member]:
        """All members, ascending by queue number."""
        return await self._store.list_ordered()

    async def is_store_ready(self) -> bool:
        """Readiness: the store answers a trivial query."""
        try:
            await self._store.count_all()
        except FoundingCircleError as e:
            logger.error(f"Member store not ready: {e.message}")
            return False
        return True

    # ── Approval ───────────────────────────────────────────────────

    async def approve_member(self, member_id: MemberId) -> Member:
        """Promote one pending member and issue a fresh access code."""
        member = await self._store.find_by_id(member_id)
        if member is None:
            raise MemberNotFoundError(str(member_id))
        check_approvable(member)
        return await self._promote(member)

    async def bulk_approve(self, count: int) -> list[Member]:
        """Approve up to `count` pending members, lowest queue number first.

        Each member is promoted independently; a member whose update fails is
        logged and left out of the result while the rest continue.
        """
        if count < 1:
            return []
        pending = await self._store.find_by_status(MemberStatus.PENDING, limit=count)
        approved: list[Member] = []
        for member in pending:
            try:
                approved.append(await self._promote(member))
            except FoundingCircleError as e:
                logger.warning(
                    f"Bulk approve skipped #{member.queue_number}: {e.message}",
                    extra={"member_id": str(member.id), "error_code": e.code},
                )
            except Exception as e:
                logger.error(
                    f"Bulk approve failed for #{member.queue_number}: {e}",
                    extra={"member_id": str(member.id)},
                    exc_info=True,
                )
        logger.info(f"Bulk approved {len(approved)} of {len(pending)} members")
        return approved

    async def _promote(self, member: Member) -> Member:
        access_code = self._generate_code()
        updated = await self._store.transition(
            member.id,
            MemberStatus.PENDING,
            {
                "status": MemberStatus.APPROVED,
                "access_code": access_code,
                "approved_at": _utcnow(),
            },
        )
        if updated is None:
            # Lost a race: the row was removed or approved by someone else
            current = await self._store.find_by_id(member.id)
            if current is None:
                raise MemberNotFoundError(str(member.id))
            raise InvalidTransitionError(
                current.status.value,
                MemberStatus.APPROVED.value,
                ErrorContext(member_id=str(member.id), queue_number=current.queue_number),
            )

        logger.info(
            f"Approved member #{updated.queue_number}",
            extra={
                "member_id": str(updated.id),
                "queue_number": updated.queue_number,
                "status": updated.status.value,
            },
        )
        self._notifications.dispatch(updated.email, access_code, updated.queue_number)
        return updated

    # ── Activation ─────────────────────────────────────────────────

    async def validate_and_activate(
        self, access_code: str, email: str,
    ) -> ActivationResult:
        """Check a (code, email) pair and activate the member behind it.

        Malformed codes and unknown pairs return valid=False. Pending members raise
        AccessCodeValidationError(NOT_YET_APPROVED). Already-activated members
        re-validate without any write.
        """
        access_code = normalize_access_code(access_code)
        email = normalize_email(email)
        if not is_well_formed(access_code):
            logger.info("Access code check failed: malformed code")
            return ActivationResult(valid=False)
        member = await self._store.find_by_credentials(access_code, email)
        if member is None:
            logger.info("Access code check failed: no matching code/email pair")
            return ActivationResult(valid=False)

        decision = evaluate_activation(member)
        if decision == ActivationDecision.ALREADY_ACTIVATED:
            logger.info(
                "Access code re-validated for activated member",
                extra={"member_id": str(member.id), "queue_number": member.queue_number},
            )
            return _activation_success(member)

        activated = await self._store.transition(
            member.id,
            MemberStatus.APPROVED,
            {"status": MemberStatus.ACTIVATED, "activated_at": _utcnow()},
        )
        if activated is None:
            # Concurrent activation (or removal) got there first: decide from current state
            current = await self._store.find_by_credentials(access_code, email)
            if current is None:
                return ActivationResult(valid=False)
            evaluate_activation(current)
            return _activation_success(current)

        logger.info(
            f"Activated member #{activated.queue_number}",
            extra={
                "member_id": str(activated.id),
                "queue_number": activated.queue_number,
                "status": activated.status.value,
            },
        )
        return _activation_success(activated)

    # ── Stats ──────────────────────────────────────────────────────

    async def get_stats(self) -> WaitlistStats:
        statuses = await self._store.list_statuses()
        return compute_waitlist_stats(statuses, self._capacity)

    # ── Removal ────────────────────────────────────────────────────

    async def remove_member(self, member_id: MemberId) -> None:
        """Delete a member and close the gap in the queue. Unknown ids are a no-op."""
        removed = await self._store.delete_and_compact(member_id)
        if removed is None:
            logger.info(
                "Remove requested for unknown member",
                extra={"member_id": str(member_id)},
            )
            return
        logger.info(
            f"Removed member #{removed.queue_number}",
            extra={"member_id": str(member_id), "queue_number": removed.queue_number},
        )


def _activation_success(member: Member) -> ActivationResult:
    return ActivationResult(
        valid=True, email=member.email, queue_number=member.queue_number,
    )
