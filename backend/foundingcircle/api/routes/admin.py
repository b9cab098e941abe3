"""Admin Routes — listing, stats, approval, bulk approval, and removal.

Invariants:
    - Listing is ordered by queue number
    - Approving an approved/activated member answers 409 INVALID_TRANSITION
    - DELETE is idempotent: unknown ids still answer 200

Design Decisions:
    - Authentication is applied by the deployment (reverse proxy / middleware),
      not by these handlers
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from foundingcircle.api.dependencies import get_founding_circle_service
from foundingcircle.core.domain_types import MemberId
from foundingcircle.schemas.member import (
    ApproveResponse,
    BulkApproveRequest,
    BulkApproveResponse,
    MemberListResponse,
    MemberResponse,
    MessageResponse,
    StatsResponse,
)
from foundingcircle.services.founding_circle import FoundingCircleService

router = APIRouter(prefix="/api/v1/founding-circle/admin", tags=["admin"])


@router.get("/members", response_model=MemberListResponse)
async def list_members(
    service: FoundingCircleService = Depends(get_founding_circle_service),
):
    members = await service.get_all_members()
    return MemberListResponse(
        total=len(members),
        members=[MemberResponse.from_member(m) for m in members],
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    service: FoundingCircleService = Depends(get_founding_circle_service),
):
    return StatsResponse.from_stats(await service.get_stats())


@router.patch("/members/{member_id}/approve", response_model=ApproveResponse)
async def approve_member(
    member_id: UUID,
    service: FoundingCircleService = Depends(get_founding_circle_service),
):
    """Approve a single pending member."""
    member = await service.approve_member(MemberId(member_id))
    return ApproveResponse(
        message="Member approved", member=MemberResponse.from_member(member),
    )


@router.post("/bulk-approve", response_model=BulkApproveResponse)
async def bulk_approve(
    body: BulkApproveRequest,
    service: FoundingCircleService = Depends(get_founding_circle_service),
):
    """Approve the first N pending members in queue order."""
    approved = await service.bulk_approve(body.count)
    return BulkApproveResponse(
        message=f"Approved {len(approved)} members",
        members=[MemberResponse.from_member(m) for m in approved],
    )


@router.delete("/members/{member_id}", response_model=MessageResponse)
async def remove_member(
    member_id: UUID,
    service: FoundingCircleService = Depends(get_founding_circle_service),
):
    """Remove a member and close the gap in the queue."""
    await service.remove_member(MemberId(member_id))
    return MessageResponse(message="Member removed from waitlist")
