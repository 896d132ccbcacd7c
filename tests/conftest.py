"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite database, session, and httpx client
fixtures. Each test gets a fresh schema on its own StaticPool engine, so no
external database server is needed.
"""

import os

# 앱 임포트 전에 환경 설정 — Settings are read once at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DEBUG"] = "false"
os.environ["AXIOM_API_TOKEN"] = ""
os.environ["GOOGLE_SA_KEY_PATH"] = ""
os.environ["AWS_ACCESS_KEY_ID"] = ""

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import datetime, timezone  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from observations.config import settings  # noqa: E402
from observations.database import Base, get_db  # noqa: E402
from observations.main import app  # noqa: E402
from observations.models import Observation, User  # noqa: E402
from observations.utils.security import create_access_token, hash_password  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 인메모리 스키마."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
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
async def _make_user(db: AsyncSession, dni: str, display_name: str, password: str, role: str) -> User:
    user = User(
        dni=dni,
        email=f"{dni}@{settings.LOGIN_EMAIL_DOMAIN}",
        display_name=display_name,
        role=role,
        password_hash=hash_password(password),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    """관리자 사용자를 생성합니다."""
    return await _make_user(db, "10000001", "Ana Admin", "admin123", "admin")


@pytest_asyncio.fixture
async def normal_user(db: AsyncSession) -> User:
    """일반 사용자(관찰 작성자)를 생성합니다."""
    return await _make_user(db, "20000002", "Bruno Operador", "user123", "user")


@pytest_asyncio.fixture
async def other_user(db: AsyncSession) -> User:
    """작성자가 아닌 다른 일반 사용자를 생성합니다."""
    return await _make_user(db, "30000003", "Carla Supervisora", "other123", "user")


async def make_observation(db: AsyncSession, owner: User, **fields: Any) -> Observation:
    """관찰 레코드를 직접 삽입합니다 (서비스 검증 없이)."""
    values: dict[str, Any] = {
        "state": "pending",
        "area": "Chancado",
        "equipment_or_location": "Faja 3",
        "severity": "medium",
        "due_date": "2024-01-11",
        "description": "Guarda de seguridad suelta",
        "responsible_name": owner.display_name,
        "created_by": owner.email,
        "created_by_id": owner.id,
        "created_at": datetime(2024, 1, 1, 15, 0, tzinfo=timezone.utc),
    }
    values.update(fields)
    obs = Observation(**values)
    db.add(obs)
    await db.flush()
    await db.refresh(obs)
    return obs


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
    })


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def user_token(normal_user) -> str:
    return make_token(normal_user)


@pytest.fixture
def other_token(other_user) -> str:
    return make_token(other_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
