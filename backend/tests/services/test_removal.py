"""Removal — tests for remove_member and queue compaction.

Tests cover:
    - removing position 3 of 5 leaves 1..4 with relative order preserved
    - removing the head and the tail both keep numbering dense
    - unknown ids are a no-op
    - the next join after a removal takes N+1 of the compacted queue
"""

import uuid

from foundingcircle.core.domain_types import MemberId


async def _positions(service):
    return [(m.queue_number, m.email) for m in await service.get_all_members()]


async def test_remove_middle_compacts(admit, service):
    await admit(5)
    members = await service.get_all_members()

    await service.remove_member(members[2].id)

    assert await _positions(service) == [
        (1, "member1@example.com"),
        (2, "member2@example.com"),
        (3, "member4@example.com"),
        (4, "member5@example.com"),
    ]


async def test_remove_head_and_tail(admit, service):
    await admit(4)
    members = await service.get_all_members()

    await service.remove_member(members[0].id)
    await service.remove_member(members[3].id)

    assert await _positions(service) == [
        (1, "member2@example.com"),
        (2, "member3@example.com"),
    ]


async def test_remove_unknown_is_noop(admit, service):
    await admit(3)
    before = await _positions(service)
    await service.remove_member(MemberId(uuid.uuid4()))
    assert await _positions(service) == before


async def test_remove_keeps_status_and_code(admit, service):
    await admit(3)
    members = await service.get_all_members()
    approved = await service.approve_member(members[2].id)

    await service.remove_member(members[0].id)

    moved = await service.get_status(approved.email)
    assert moved.queue_number == 2
    assert moved.access_code == approved.access_code
    assert moved.status == approved.status


async def test_join_after_removal_takes_next_number(admit, service):
    await admit(3)
    members = await service.get_all_members()
    await service.remove_member(members[1].id)

    result = await service.join_waitlist("late@example.com")

    assert result.queue_number == 3
    assert [q for q, _ in await _positions(service)] == [1, 2, 3]


async def test_remove_last_member_empties_queue(service):
    await service.join_waitlist("solo@example.com")
    [member] = await service.get_all_members()
    await service.remove_member(member.id)

    assert await service.get_all_members() == []
    again = await service.join_waitlist("solo@example.com")
    assert again.queue_number == 1
