"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite) database created per test,
session, httpx client with ``get_db`` overridden, a controllable clock, and
branch/employee fixtures.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.services.shift_service import ShiftService, shift_service

TEST_DATABASE_URL = "sqlite+aiosqlite://"

KST = timezone(timedelta(hours=9))


class FakeClock:
    """테스트용 시계 — 주입 가능한 현재 시각 (Injectable "now")."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트마다 새 인메모리 DB를 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def clock() -> FakeClock:
    # 2026-03-02 09:00 KST (월요일)
    return FakeClock(datetime(2026, 3, 2, 9, 0, tzinfo=KST))


@pytest.fixture
def service(clock: FakeClock) -> ShiftService:
    return ShiftService(clock=clock)


@pytest_asyncio.fixture
async def client(db: AsyncSession, clock: FakeClock, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션과 시계를 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    monkeypatch.setattr(shift_service, "_clock", clock)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def branch(db: AsyncSession):
    """테스트 지점을 생성합니다."""
    from app.models.branch import Branch
    b = Branch(name="강남점")
    db.add(b)
    await db.commit()
    await db.refresh(b)
    return b


@pytest_asyncio.fixture
async def employee(db: AsyncSession):
    """시급 10,000원 직원을 생성합니다."""
    from app.models.employee import Employee
    e = Employee(name="김민수", hourly_rate=10000, is_active=True)
    db.add(e)
    await db.commit()
    await db.refresh(e)
    return e


@pytest_asyncio.fixture
async def other_employee(db: AsyncSession):
    from app.models.employee import Employee
    e = Employee(name="이서연", hourly_rate=12000, is_active=True)
    db.add(e)
    await db.commit()
    await db.refresh(e)
    return e


def clock_url(branch, employee, action: str) -> str:
    return f"/api/v1/app/branches/{branch.id}/employees/{employee.id}/{action}"
