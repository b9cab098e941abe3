"""Root conftest — shared test configuration and lifecycle fixtures.

Invariants:
    - Tests never touch a real database or mail provider
    - `store` runs each test against both adapters (memory, sqlite) so they
      honour the same MemberStore contract
    - RecordingNotifier captures every delivery the dispatcher makes

Design Decisions:
    - SQLite in-memory: fast, no external dependency; Postgres row locking is
      not exercised here (concurrency tests use the memory store)
    - DatabaseSessionManager built with __new__ so no pooled engine is created
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("STORE_BACKEND", "memory")

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from foundingcircle.db.base import Base
import foundingcircle.models  # noqa: F401  registers tables on Base.metadata
from foundingcircle.infrastructure.database import DatabaseSessionManager
from foundingcircle.infrastructure.member_store import SqlAlchemyMemberStore
from foundingcircle.infrastructure.memory_store import InMemoryMemberStore
from foundingcircle.infrastructure.notification_dispatcher import NotificationDispatcher
from foundingcircle.services.founding_circle import FoundingCircleService


class RecordingNotifier:
    """EmailNotifier that remembers what it was asked to send."""

    def __init__(self):
        self.sent: list[tuple[str, str, int]] = []

    async def notify_welcome_with_code(
        self, email: str, access_code: str, queue_number: int,
    ) -> None:
        self.sent.append((email, access_code, queue_number))


class FailingNotifier:
    """EmailNotifier whose provider is always down."""

    def __init__(self):
        self.attempts = 0

    async def notify_welcome_with_code(
        self, email: str, access_code: str, queue_number: int,
    ) -> None:
        self.attempts += 1
        raise RuntimeError("mail provider unreachable")


async def _store_on(engine) -> SqlAlchemyMemberStore:
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = engine
    manager._session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
    store = SqlAlchemyMemberStore(manager)
    await store.ensure_sequence()
    return store


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def sql_store(test_engine):
    return await _store_on(test_engine)


@pytest.fixture
async def file_sql_store(tmp_path):
    """SQLite file database: a connection pool, so transactions really interleave."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'waitlist.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield await _store_on(engine)
    await engine.dispose()


@pytest.fixture
def memory_store():
    return InMemoryMemberStore()


@pytest.fixture(params=["memory", "sql"])
def store(request, memory_store, sql_store):
    """Each test using this runs once per adapter."""
    return memory_store if request.param == "memory" else sql_store


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    return FailingNotifier()


@pytest.fixture
async def dispatcher(notifier):
    dispatcher = NotificationDispatcher(notifier)
    yield dispatcher
    await dispatcher.drain()


@pytest.fixture
def service(store, dispatcher):
    return FoundingCircleService(store, dispatcher)


@pytest.fixture
def memory_service(memory_store, dispatcher):
    """Service over the memory store, for tests that race coroutines."""
    return FoundingCircleService(memory_store, dispatcher)


@pytest.fixture
def admit(service):
    """Join `count` applicants named member1@example.com, member2@... in order."""
    async def _admit(count: int, prefix: str = "member"):
        return [
            await service.join_waitlist(f"{prefix}{i}@example.com")
            for i in range(1, count + 1)
        ]
    return _admit
