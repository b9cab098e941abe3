"""Error Hierarchy — tests for codes, statuses, and the REST envelope."""

from foundingcircle.core.domain_types import ActivationFailure
from foundingcircle.core.errors import (
    AccessCodeValidationError,
    DuplicateKeyError,
    ErrorContext,
    MemberNotFoundError,
    StoreUnavailableError,
)


def test_not_found_envelope():
    body = MemberNotFoundError("ghost@example.com").to_response()["error"]
    assert body["code"] == "MEMBER_NOT_FOUND"
    assert body["category"] == "resource_not_found"
    assert body["context"]["member_id"] == "ghost@example.com"


def test_activation_failures_have_distinct_codes():
    codes = {AccessCodeValidationError(reason).code for reason in ActivationFailure}
    assert codes == {
        "ACCESS_CODE_INVALID", "ACCESS_CODE_NOT_APPROVED", "ACCESS_CODE_NOT_ACTIVATABLE",
    }


def test_not_yet_approved_message():
    err = AccessCodeValidationError(ActivationFailure.NOT_YET_APPROVED)
    assert err.message.startswith("Your waitlist spot has not been approved yet")
    assert err.is_business_outcome


def test_duplicate_key_carries_key():
    err = DuplicateKeyError("email")
    assert err.key == "email"
    assert err.http_status == 409


def test_store_unavailable_hides_details():
    err = StoreUnavailableError("connection refused on 10.0.0.3", "execute")
    body = err.to_response()["error"]
    assert err.http_status == 503
    assert not err.is_business_outcome
    assert "10.0.0.3" not in body["message"]


def test_user_message_overrides_message():
    err = MemberNotFoundError("x", ErrorContext(user_message="Nope"))
    assert err.to_response()["error"]["message"] == "Nope"
