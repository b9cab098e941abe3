"""SQLAlchemy Member Store — MemberStore implementation over the founding_members table.

Invariants:
    - Every public method opens its own session: no member state cached across calls
    - insert_next: counter increment + insert commit together or not at all
    - delete_and_compact: delete + shift + counter decrement commit together
    - Every admission and removal writes the queue_sequences row before touching
      founding_members, so they serialise on its write lock (SELECT ... FOR UPDATE
      is not used: SQLite ignores it)
    - transition() only writes when the row is still in the expected status
    - Returns core Member dataclasses, never ORM rows

Design Decisions:
    - Renumbering is two set-based UPDATEs (negate-and-shift, then flip sign) so the
      unique index on queue_number never observes a transient duplicate, whatever
      order the database visits rows in
    - UPDATE ... RETURNING on the counter row: one round trip, and the row lock is
      taken by the same statement that reserves the number
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from foundingcircle.core.domain_types import Member, MemberId, MemberStatus
from foundingcircle.core.errors import StoreUnavailableError
from foundingcircle.infrastructure.database import DatabaseSessionManager
from foundingcircle.models.member import FoundingMember
from foundingcircle.models.queue_sequence import MEMBER_SEQUENCE, QueueSequence

logger = logging.getLogger(__name__)

_WRITABLE_FIELDS = frozenset({
    "status", "access_code", "approved_at", "activated_at",
})


def _to_member(row: FoundingMember) -> Member:
    return Member(
        id=MemberId(row.id),
        email=row.email,
        queue_number=row.queue_number,
        status=MemberStatus(row.status),
        signed_up_at=row.signed_up_at,
        access_code=row.access_code,
        approved_at=row.approved_at,
        activated_at=row.activated_at,
        metadata=dict(row.member_metadata or {}),
    )


def _column_values(changes: dict[str, Any]) -> dict[str, Any]:
    unknown = set(changes) - _WRITABLE_FIELDS
    if unknown:
        raise ValueError(f"Unsupported member fields: {sorted(unknown)}")
    return {
        key: value.value if isinstance(value, MemberStatus) else value
        for key, value in changes.items()
    }


class SqlAlchemyMemberStore:
    """Persists founding members through a DatabaseSessionManager."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    # ── Setup ──────────────────────────────────────────────────────

    async def ensure_sequence(self) -> int:
        """Create the queue counter row if missing, seeded from the member count."""
        async with self._db.session() as session:
            async with session.begin():
                existing = await session.get(QueueSequence, MEMBER_SEQUENCE)
                if existing is not None:
                    return existing.value
                count = await session.scalar(
                    select(func.count()).select_from(FoundingMember),
                )
                session.add(QueueSequence(name=MEMBER_SEQUENCE, value=count or 0))
        logger.info(f"Queue sequence seeded at {count or 0}")
        return count or 0

    # ── Write ──────────────────────────────────────────────────────

    async def insert_next(
        self, email: str, access_code: str | None, metadata: dict[str, Any],
    ) -> Member:
        async with self._db.session() as session:
            async with session.begin():
                queue_number = await self._reserve_queue_number(session)
                row = FoundingMember(
                    email=email,
                    queue_number=queue_number,
                    access_code=access_code,
                    status=MemberStatus.PENDING.value,
                    signed_up_at=datetime.now(timezone.utc),
                    member_metadata=dict(metadata),
                )
                session.add(row)
                await session.flush()
            return _to_member(row)

    async def transition(
        self,
        member_id: MemberId,
        expected: MemberStatus,
        changes: dict[str, Any],
    ) -> Member | None:
        values = _column_values(changes)
        async with self._db.session() as session:
            async with session.begin():
                result = await session.execute(
                    update(FoundingMember)
                    .where(
                        FoundingMember.id == member_id,
                        FoundingMember.status == expected.value,
                    )
                    .values(**values)
                    .execution_options(synchronize_session=False),
                )
                if result.rowcount == 0:
                    return None
                row = await session.scalar(
                    select(FoundingMember).where(FoundingMember.id == member_id),
                )
            return _to_member(row) if row else None

    async def delete_and_compact(self, member_id: MemberId) -> Member | None:
        async with self._db.session() as session:
            async with session.begin():
                # Counter write lock first; the victim row is read under it
                await self._lock_sequence(session)
                row = await session.scalar(
                    select(FoundingMember).where(FoundingMember.id == member_id),
                )
                if row is None:
                    return None
                removed = _to_member(row)

                await session.execute(
                    delete(FoundingMember)
                    .where(FoundingMember.id == member_id)
                    .execution_options(synchronize_session=False),
                )
                # Shift everyone behind the gap into negative space, then flip back
                await session.execute(
                    update(FoundingMember)
                    .where(FoundingMember.queue_number > removed.queue_number)
                    .values(queue_number=-(FoundingMember.queue_number - 1))
                    .execution_options(synchronize_session=False),
                )
                shifted = await session.execute(
                    update(FoundingMember)
                    .where(FoundingMember.queue_number < 0)
                    .values(queue_number=-FoundingMember.queue_number)
                    .execution_options(synchronize_session=False),
                )
                shifted_count = shifted.rowcount
                await session.execute(
                    update(QueueSequence)
                    .where(QueueSequence.name == MEMBER_SEQUENCE)
                    .values(value=QueueSequence.value - 1)
                    .execution_options(synchronize_session=False),
                )
        logger.info(
            f"Compacted queue after removing #{removed.queue_number} "
            f"({shifted_count} shifted)",
            extra={"member_id": str(member_id), "queue_number": removed.queue_number},
        )
        return removed

    # ── Read ───────────────────────────────────────────────────────

    async def find_by_email(self, email: str) -> Member | None:
        return await self._first(FoundingMember.email == email)

    async def find_by_id(self, member_id: MemberId) -> Member | None:
        return await self._first(FoundingMember.id == member_id)

    async def find_by_credentials(
        self, access_code: str, email: str,
    ) -> Member | None:
        return await self._first(
            FoundingMember.access_code == access_code,
            FoundingMember.email == email,
        )

    async def list_ordered(self) -> list[Member]:
        async with self._db.session() as session:
            rows = await session.scalars(
                select(FoundingMember).order_by(FoundingMember.queue_number),
            )
            return [_to_member(r) for r in rows]

    async def count_all(self) -> int:
        async with self._db.session() as session:
            count = await session.scalar(
                select(func.count()).select_from(FoundingMember),
            )
            return count or 0

    async def list_statuses(self) -> list[MemberStatus]:
        async with self._db.session() as session:
            statuses = await session.scalars(select(FoundingMember.status))
            return [MemberStatus(s) for s in statuses]

    async def find_by_status(
        self, status: MemberStatus, limit: int | None = None,
    ) -> list[Member]:
        query = (
            select(FoundingMember)
            .where(FoundingMember.status == status.value)
            .order_by(FoundingMember.queue_number)
        )
        if limit is not None:
            query = query.limit(limit)
        async with self._db.session() as session:
            rows = await session.scalars(query)
            return [_to_member(r) for r in rows]

    # ── Private ────────────────────────────────────────────────────

    async def _first(self, *criteria) -> Member | None:
        async with self._db.session() as session:
            row = await session.scalar(select(FoundingMember).where(*criteria))
            return _to_member(row) if row else None

    async def _reserve_queue_number(self, session: AsyncSession) -> int:
        value = await session.scalar(
            update(QueueSequence)
            .where(QueueSequence.name == MEMBER_SEQUENCE)
            .values(value=QueueSequence.value + 1)
            .returning(QueueSequence.value)
            .execution_options(synchronize_session=False),
        )
        if value is None:
            raise StoreUnavailableError(
                "queue sequence row missing (run ensure_sequence)", "reserve",
            )
        return value

    async def _lock_sequence(self, session: AsyncSession) -> int:
        """No-op UPDATE on the counter row: a write lock on PostgreSQL and SQLite alike."""
        value = await session.scalar(
            update(QueueSequence)
            .where(QueueSequence.name == MEMBER_SEQUENCE)
            .values(value=QueueSequence.value)
            .returning(QueueSequence.value)
            .execution_options(synchronize_session=False),
        )
        if value is None:
            raise StoreUnavailableError(
                "queue sequence row missing (run ensure_sequence)", "compact",
            )
        return value
