"""Activation — tests for validate_and_activate.

Tests cover:
    - approved member with the right (code, email) is activated once
    - re-validating an activated member succeeds without rewriting activated_at
    - pending member raises NOT_YET_APPROVED and stays pending
    - wrong email, wrong code, and the pre-approval code return valid=False
    - codes and emails are normalised before lookup
    - malformed codes are rejected without a store lookup
"""

import pytest

from foundingcircle.core.domain_types import ActivationFailure, MemberStatus
from foundingcircle.core.errors import AccessCodeValidationError
from foundingcircle.services.founding_circle import FoundingCircleService


@pytest.fixture
async def approved(admit, service):
    """Three joins; member #2 approved."""
    await admit(3)
    members = await service.get_all_members()
    return await service.approve_member(members[1].id)


async def test_activate_approved_member(service, approved):
    result = await service.validate_and_activate(approved.access_code, approved.email)

    assert result.valid is True
    assert result.email == approved.email
    assert result.queue_number == 2
    stored = await service.get_status(approved.email)
    assert stored.status == MemberStatus.ACTIVATED
    assert stored.activated_at is not None


async def test_activation_is_idempotent(service, approved):
    await service.validate_and_activate(approved.access_code, approved.email)
    first = await service.get_status(approved.email)

    again = await service.validate_and_activate(approved.access_code, approved.email)

    assert again.valid is True
    assert again.queue_number == 2
    stored = await service.get_status(approved.email)
    assert stored.activated_at == first.activated_at
    assert (await service.get_stats()).activated == 1


async def test_pending_member_not_yet_approved(service):
    joined = await service.join_waitlist("ada@example.com")

    with pytest.raises(AccessCodeValidationError) as exc_info:
        await service.validate_and_activate(joined.access_code, "ada@example.com")

    assert exc_info.value.reason == ActivationFailure.NOT_YET_APPROVED
    stored = await service.get_status("ada@example.com")
    assert stored.status == MemberStatus.PENDING


async def test_wrong_email_is_invalid(service, approved):
    result = await service.validate_and_activate(approved.access_code, "member1@example.com")
    assert result.valid is False
    assert result.email is None
    stored = await service.get_status(approved.email)
    assert stored.status == MemberStatus.APPROVED


async def test_wrong_code_is_invalid(service, approved):
    result = await service.validate_and_activate("OSIA-AAAA-AAAA-AAAA", approved.email)
    assert result.valid is False


async def test_pre_approval_code_no_longer_valid(admit, service):
    [joined] = await admit(1)
    members = await service.get_all_members()
    await service.approve_member(members[0].id)

    result = await service.validate_and_activate(joined.access_code, "member1@example.com")

    assert result.valid is False


async def test_code_and_email_normalised(service, approved):
    result = await service.validate_and_activate(
        f"  {approved.access_code.lower()} ", approved.email.upper(),
    )
    assert result.valid is True


class _CountingStore:
    """Delegates to a real store and counts credential lookups."""

    def __init__(self, inner):
        self._inner = inner
        self.credential_lookups = 0

    def __getattr__(self, name):
        return getattr(self._inner, name)

    async def find_by_credentials(self, access_code, email):
        self.credential_lookups += 1
        return await self._inner.find_by_credentials(access_code, email)


@pytest.mark.parametrize("code", ["", "OSIA-1234", "ABCD-EFGH-JKLM-NPQR", "OSIA-AAAA-AAAA-AAA0"])
async def test_malformed_code_rejected_without_lookup(memory_store, dispatcher, code):
    store = _CountingStore(memory_store)
    service = FoundingCircleService(store, dispatcher)
    await service.join_waitlist("ada@example.com")

    result = await service.validate_and_activate(code, "ada@example.com")

    assert result.valid is False
    assert store.credential_lookups == 0


async def test_well_formed_code_is_looked_up(memory_store, dispatcher):
    store = _CountingStore(memory_store)
    service = FoundingCircleService(store, dispatcher)
    await service.validate_and_activate("osia-aaaa-bbbb-cccc", "ada@example.com")
    assert store.credential_lookups == 1
