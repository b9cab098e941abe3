"""API test fixtures — FastAPI app wired to an in-memory service.

Invariants:
    - get_founding_circle_service is overridden; the lifespan never runs
      (ASGITransport does not send lifespan events)
    - Overrides are cleared after every test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from foundingcircle.api.dependencies import get_founding_circle_service
from foundingcircle.core.errors import StoreUnavailableError
from foundingcircle.infrastructure.memory_store import InMemoryMemberStore
from foundingcircle.main import app
from foundingcircle.services.founding_circle import FoundingCircleService


class UnreachableStore(InMemoryMemberStore):
    """Memory store whose reads fail like a dropped database connection."""

    async def count_all(self) -> int:
        raise StoreUnavailableError("connection refused", "execute")

    async def list_statuses(self):
        raise StoreUnavailableError("connection refused", "execute")


async def _client_for(service):
    app.dependency_overrides[get_founding_circle_service] = lambda: service
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(memory_service):
    async with await _client_for(memory_service) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def broken_client(dispatcher):
    service = FoundingCircleService(UnreachableStore(), dispatcher)
    async with await _client_for(service) as c:
        yield c
    app.dependency_overrides.clear()
