"""Service test fixtures: async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for ordering
      and transaction semantics (PostgreSQL-specific features not exercised)
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from taskrank.db.base import Base
from taskrank.infrastructure.database import get_db, DatabaseSessionManager
from taskrank.infrastructure.repositories import SqlUnitOfWork
from taskrank.models.owner import Owner
from taskrank.services.ranking_service import RankingService
import taskrank.infrastructure.database as db_module
from taskrank.main import app

from tests.services.fake_uow import FakeUnitOfWork


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
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_owner(test_db):
    """Insert an owner directly into the test DB."""
    owner = Owner(name="seed owner")
    test_db.add(owner)
    await test_db.commit()
    await test_db.refresh(owner)
    return owner


@pytest.fixture
def sql_uow(test_db):
    return SqlUnitOfWork(test_db)


@pytest.fixture
def sql_service(sql_uow):
    return RankingService(sql_uow)


@pytest.fixture
def fake_uow():
    return FakeUnitOfWork()


@pytest.fixture
def fake_service(fake_uow):
    return RankingService(fake_uow)
