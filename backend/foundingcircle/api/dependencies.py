"""API Dependencies — hand the startup-built service to route handlers.

Invariants:
    - The service is built once in the lifespan and stored on app.state
    - Routes never construct stores, notifiers, or services themselves

Design Decisions:
    - app.state over module globals: tests swap the whole graph through
      app.dependency_overrides without patching imports
"""

from fastapi import Request

from foundingcircle.services.founding_circle import FoundingCircleService


def get_founding_circle_service(request: Request) -> FoundingCircleService:
    """FastAPI dependency for the Founding Circle service."""
    service = getattr(request.app.state, "founding_circle", None)
    if service is None:
        raise RuntimeError("Founding Circle service not initialized")
    return service
