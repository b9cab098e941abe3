"""In-Memory Member Store — dict-backed MemberStore for local runs and tests.

Invariants:
    - A single asyncio.Lock guards every mutation, so insert_next and
      delete_and_compact are linearizable with respect to each other
    - Callers only ever receive copies; mutating a returned Member never leaks back
    - Same uniqueness rules as the SQL table: email and queue_number

Design Decisions:
    - Stand-in for the database when store_backend="memory" (no DATABASE_URL needed),
      state lost on restart
    - Reads take no lock: each read is a single synchronous pass over the dict,
      with no await in between
"""

import asyncio
import copy
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from foundingcircle.core.domain_types import Member, MemberId, MemberStatus
from foundingcircle.core.errors import DuplicateKeyError

_WRITABLE_FIELDS = frozenset({
    "status", "access_code", "approved_at", "activated_at",
})


def _copy(member: Member) -> Member:
    return replace(member, metadata=copy.deepcopy(member.metadata))


class InMemoryMemberStore:
    """Keeps founding members in process memory."""

    def __init__(self):
        self._members: dict[MemberId, Member] = {}
        self._lock = asyncio.Lock()

    # ── Write ──────────────────────────────────────────────────────

    async def insert_next(
        self, email: str, access_code: str | None, metadata: dict[str, Any],
    ) -> Member:
        async with self._lock:
            if any(m.email == email for m in self._members.values()):
                raise DuplicateKeyError("email")
            member = Member(
                id=MemberId(uuid.uuid4()),
                email=email,
                queue_number=len(self._members) + 1,
                status=MemberStatus.PENDING,
                signed_up_at=datetime.now(timezone.utc),
                access_code=access_code,
                metadata=copy.deepcopy(metadata),
            )
            self._members[member.id] = member
            return _copy(member)

    async def transition(
        self,
        member_id: MemberId,
        expected: MemberStatus,
        changes: dict[str, Any],
    ) -> Member | None:
        unknown = set(changes) - _WRITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported member fields: {sorted(unknown)}")
        async with self._lock:
            member = self._members.get(member_id)
            if member is None or member.status != expected:
                return None
            updated = replace(member, **changes)
            self._members[member_id] = updated
            return _copy(updated)

    async def delete_and_compact(self, member_id: MemberId) -> Member | None:
        async with self._lock:
            removed = self._members.pop(member_id, None)
            if removed is None:
                return None
            for other_id, other in list(self._members.items()):
                if other.queue_number > removed.queue_number:
                    self._members[other_id] = replace(
                        other, queue_number=other.queue_number - 1,
                    )
            return _copy(removed)

    # ── Read ───────────────────────────────────────────────────────

    async def find_by_email(self, email: str) -> Member | None:
        return self._find(lambda m: m.email == email)

    async def find_by_id(self, member_id: MemberId) -> Member | None:
        member = self._members.get(member_id)
        return _copy(member) if member else None

    async def find_by_credentials(
        self, access_code: str, email: str,
    ) -> Member | None:
        return self._find(
            lambda m: m.access_code == access_code and m.email == email,
        )

    async def list_ordered(self) -> list[Member]:
        return [_copy(m) for m in self._ordered()]

    async def count_all(self) -> int:
        return len(self._members)

    async def list_statuses(self) -> list[MemberStatus]:
        return [m.status for m in self._members.values()]

    async def find_by_status(
        self, status: MemberStatus, limit: int | None = None,
    ) -> list[Member]:
        matches = [m for m in self._ordered() if m.status == status]
        if limit is not None:
            matches = matches[:limit]
        return [_copy(m) for m in matches]

    # ── Private ────────────────────────────────────────────────────

    def _ordered(self) -> list[Member]:
        return sorted(self._members.values(), key=lambda m: m.queue_number)

    def _find(self, predicate) -> Member | None:
        for member in self._members.values():
            if predicate(member):
                return _copy(member)
        return None
