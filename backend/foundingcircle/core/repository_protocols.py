"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - insert_next and delete_and_compact are the store's atomicity primitives:
      queue-number assignment and compaction are linearizable inside the adapter,
      never computed by the caller from a count it read earlier
    - transition() is a compare-and-set on status, so racing approvals and
      activations resolve in the store instead of by read-then-write in the service
"""

from typing import Any, Protocol

from foundingcircle.core.domain_types import Member, MemberId, MemberStatus


class MemberStore(Protocol):
    """Contract for founding member persistence — implemented by shell."""
    async def insert_next(
        self, email: str, access_code: str | None, metadata: dict[str, Any],
    ) -> Member: ...
    async def find_by_email(self, email: str) -> Member | None: ...
    async def find_by_id(self, member_id: MemberId) -> Member | None: ...
    async def find_by_credentials(
        self, access_code: str, email: str,
    ) -> Member | None: ...
    async def list_ordered(self) -> list[Member]: ...
    async def count_all(self) -> int: ...
    async def list_statuses(self) -> list[MemberStatus]: ...
    async def find_by_status(
        self, status: MemberStatus, limit: int | None = None,
    ) -> list[Member]: ...
    async def transition(
        self,
        member_id: MemberId,
        expected: MemberStatus,
        changes: dict[str, Any],
    ) -> Member | None: ...
    async def delete_and_compact(self, member_id: MemberId) -> Member | None: ...


class EmailNotifier(Protocol):
    """Contract for access-code delivery — implemented by shell."""
    async def notify_welcome_with_code(
        self, email: str, access_code: str, queue_number: int,
    ) -> None: ...
