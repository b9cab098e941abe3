"""Waitlist Routes — public join, status lookup, and access-code validation.

Invariants:
    - Emails are normalised by the request schemas before reaching the service
    - Duplicate joins return 200 with the existing position (never an error)
    - An unknown (code, email) pair answers 400 ACCESS_CODE_INVALID
    - "Not yet approved" and "not valid for activation" surface as distinct error codes

Design Decisions:
    - Activation results with valid=False are turned into AccessCodeValidationError
      here: the service reports outcomes, the HTTP layer picks status codes
"""

from fastapi import APIRouter, Depends

from foundingcircle.api.dependencies import get_founding_circle_service
from foundingcircle.core.domain_types import ActivationFailure
from foundingcircle.core.errors import AccessCodeValidationError, MemberNotFoundError
from foundingcircle.infrastructure.observability import mask_email
from foundingcircle.schemas.member import (
    ActivationResponse,
    JoinRequest,
    JoinResponse,
    MemberStatusResponse,
    ValidateCodeRequest,
)
from foundingcircle.services.founding_circle import FoundingCircleService

router = APIRouter(prefix="/api/v1/founding-circle", tags=["waitlist"])


@router.post("/join", response_model=JoinResponse)
async def join_waitlist(
    body: JoinRequest,
    service: FoundingCircleService = Depends(get_founding_circle_service),
):
    """Join the waitlist (idempotent per email)."""
    result = await service.join_waitlist(body.email, body.referral_source)
    return JoinResponse.from_result(result)


@router.get("/status/{email}", response_model=MemberStatusResponse)
async def get_status(
    email: str,
    service: FoundingCircleService = Depends(get_founding_circle_service),
):
    """Look up a waitlist position by email."""
    member = await service.get_status(email)
    if member is None:
        raise MemberNotFoundError(mask_email(email))
    return MemberStatusResponse.from_member(member)


@router.post("/validate-code", response_model=ActivationResponse)
async def validate_code(
    body: ValidateCodeRequest,
    service: FoundingCircleService = Depends(get_founding_circle_service),
):
    """Validate an access code during downstream signup and activate it."""
    result = await service.validate_and_activate(body.access_code, body.email)
    if not result.valid:
        raise AccessCodeValidationError(ActivationFailure.NOT_FOUND)
    return ActivationResponse.from_result(result)
