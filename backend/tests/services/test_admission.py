"""Admission — tests for join_waitlist and status lookup.

Tests cover:
    - first joins get dense queue numbers 1..N in arrival order
    - emails are normalised (trim + lowercase) before lookup and insert
    - a repeated join returns the existing position without a new row
    - every new member gets a well-formed code and an email dispatch
    - referral source lands in metadata, defaulting to "direct"
    - joins past capacity still succeed with the waitlist message
"""

from foundingcircle.core.access_codes import is_well_formed
from foundingcircle.core.domain_types import MemberStatus
from foundingcircle.infrastructure.notification_dispatcher import NotificationDispatcher
from foundingcircle.services.founding_circle import FoundingCircleService


async def test_first_joins_are_numbered_in_order(admit, service):
    results = await admit(3)
    assert [r.queue_number for r in results] == [1, 2, 3]
    assert all(r.created for r in results)
    members = await service.get_all_members()
    assert [m.email for m in members] == [
        "member1@example.com", "member2@example.com", "member3@example.com",
    ]
    assert all(m.status == MemberStatus.PENDING for m in members)


async def test_join_returns_code_and_welcome_message(service):
    result = await service.join_waitlist("ada@example.com")
    assert is_well_formed(result.access_code)
    assert result.message == (
        "Welcome to the Founding Circle! You're #1 in line. "
        f"Your access code is {result.access_code}"
    )


async def test_repeat_join_is_idempotent(service):
    first = await service.join_waitlist("ada@example.com")
    await service.join_waitlist("bob@example.com")
    again = await service.join_waitlist("ada@example.com")

    assert again.created is False
    assert again.queue_number == first.queue_number == 1
    assert again.access_code == first.access_code
    assert again.message == "You're already on the waitlist at position #1"
    assert (await service.get_stats()).total == 2


async def test_email_is_normalised(service):
    first = await service.join_waitlist("  Ada@Example.COM ")
    again = await service.join_waitlist("ada@example.com")
    assert again.created is False
    assert again.queue_number == first.queue_number
    member = await service.get_status("ADA@example.com")
    assert member.email == "ada@example.com"


async def test_join_dispatches_access_code_email(service, dispatcher, notifier):
    result = await service.join_waitlist("ada@example.com")
    await dispatcher.drain()
    assert notifier.sent == [("ada@example.com", result.access_code, 1)]


async def test_repeat_join_sends_no_second_email(service, dispatcher, notifier):
    await service.join_waitlist("ada@example.com")
    await service.join_waitlist("ada@example.com")
    await dispatcher.drain()
    assert len(notifier.sent) == 1


async def test_referral_source_recorded(service):
    await service.join_waitlist("ada@example.com", referral_source="twitter")
    await service.join_waitlist("bob@example.com")
    ada = await service.get_status("ada@example.com")
    bob = await service.get_status("bob@example.com")
    assert ada.metadata == {"referralSource": "twitter"}
    assert bob.metadata == {"referralSource": "direct"}


async def test_join_beyond_capacity_still_admits(store, dispatcher):
    service = FoundingCircleService(store, dispatcher, capacity=2)
    await service.join_waitlist("a@example.com")
    await service.join_waitlist("b@example.com")
    third = await service.join_waitlist("c@example.com")
    assert third.created is True
    assert third.queue_number == 3
    assert "waitlist at position #3" in third.message


async def test_get_status_unknown_email(service):
    assert await service.get_status("ghost@example.com") is None


async def test_join_succeeds_when_email_provider_fails(memory_store, failing_notifier):
    dispatcher = NotificationDispatcher(failing_notifier)
    service = FoundingCircleService(memory_store, dispatcher)
    result = await service.join_waitlist("ada@example.com")
    await dispatcher.drain()
    assert result.created is True
    assert failing_notifier.attempts == 1
    assert await service.get_status("ada@example.com") is not None
