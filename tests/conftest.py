from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import app.models  # noqa: F401
from app.core.database import get_session
from app.main import app as fastapi_app
from app.models.hazard import Hazard
from app.models.repair_tracker import RepairTracker
from app.models.worker import Worker
from app.repositories.record_store import SqlRecordStore


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session):
    return SqlRecordStore(session)


@pytest.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_session] = override_get_session
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def seed(session_factory):
    """Insert rows through a separate session, the way another request would."""

    class Seeder:
        async def worker(self, name: str, **kw) -> Worker:
            return await self._add(Worker(name=name, **kw))

        async def hazard(self, with_tracker: bool = True, tracker: dict | None = None, **kw) -> Hazard:
            data = {
                "latitude": 3.139,
                "longitude": 101.6869,
                "hazard_type": "pothole",
                "risk_level": "medium",
                "reported_at": datetime(2025, 3, 1, 8, 30, tzinfo=timezone.utc),
            }
            data.update(kw)
            hazard = await self._add(Hazard(**data))
            if with_tracker:
                await self._add(RepairTracker(id=hazard.id, reported_at=hazard.reported_at, **(tracker or {})))
            return hazard

        async def _add(self, obj):
            async with session_factory() as s:
                s.add(obj)
                await s.commit()
                await s.refresh(obj)
            return obj

    return Seeder()
