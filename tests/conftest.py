"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite) DB, session, and httpx
client fixtures. The schema is created fresh for every test.
Settings are read at import time, so the environment is prepared first.
"""

import os

os.environ.setdefault("JWT_SECRET_KEY", "fintrack-test-signing-secret-0123456789")
# bcrypt 최소 비용으로 테스트 속도 확보 — Minimum bcrypt cost keeps the suite fast
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["TOKEN_HASH_ROUNDS"] = "4"
os.environ["LOG_JSON"] = "false"
os.environ["AXIOM_API_TOKEN"] = ""

from collections.abc import AsyncGenerator  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from fintrack.database import Base, get_db  # noqa: E402
from fintrack.main import app  # noqa: E402
from fintrack.models import *  # noqa: E402,F401,F403 — register all models with metadata
from fintrack.schemas.auth import AuthResponse, SignUpRequest  # noqa: E402
from fintrack.services.auth_service import auth_service  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"

TEST_EMAIL = "a@b.com"
TEST_PASSWORD = "Str0ng!Passw0rd"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 모든 세션이 하나의 인메모리 DB를 공유합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
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


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def registered(db: AsyncSession) -> AuthResponse:
    """a@b.com 사용자를 가입시키고 커밋합니다."""
    result = await auth_service.sign_up(
        db,
        SignUpRequest(email=TEST_EMAIL, password=TEST_PASSWORD, first_name="A", last_name="B"),
    )
    await db.commit()
    return result