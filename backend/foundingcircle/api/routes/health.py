"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the member store is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from foundingcircle.api.dependencies import get_founding_circle_service
from foundingcircle.services.founding_circle import FoundingCircleService

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "founding-circle-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(
    service: FoundingCircleService = Depends(get_founding_circle_service),
):
    """Readiness probe — includes member store connectivity."""
    if not await service.is_store_ready():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "store_unavailable",
            },
        )
    return {"status": "ready", "checks": {"store": "healthy"}}
