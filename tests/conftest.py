"""
Test configuration and fixtures for the EF Portal backend tests.
"""
import os
import tempfile

# Must be set before the application modules read settings
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOCAL_STORAGE_PATH", tempfile.mkdtemp(prefix="efportal-uploads-"))

import pytest
from typing import AsyncGenerator
from decimal import Decimal

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.core.database import Base, get_db
from app.core.security import get_password_hash, get_token_service
from app.modules.users.repository import UserRepository
from main import app

# Register every table on Base.metadata
from app.modules.users import models as _users  # noqa: F401
from app.modules.loans import models as _loans  # noqa: F401
from app.modules.cards import models as _cards  # noqa: F401
from app.modules.employees import models as _employees  # noqa: F401


# ============================================================
# Database Fixtures
# ============================================================

# Use SQLite for testing (in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Create a fresh in-memory database for each test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    """Session factory for tests that need independent sessions"""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for each test"""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ============================================================
# User Fixtures
# ============================================================

async def create_user(
    db_session: AsyncSession,
    email: str,
    password: str = "Secret123!",
    name: str = "Test User",
    income: Decimal = None,
    balance: Decimal = Decimal("50000.00"),
) -> int:
    """Insert a user directly through the repository"""
    user_id = await UserRepository(db_session).create(
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        monthly_income=income,
        balance=balance,
    )
    await db_session.commit()
    return user_id


def bearer(user_id: int) -> dict:
    token = get_token_service().issue(user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def test_user(db_session) -> int:
    """User with income 10000 and the default starting balance"""
    return await create_user(
        db_session,
        email="alice@efportal.com",
        password="AlicePass123!",
        name="Alice",
        income=Decimal("10000.00"),
    )


@pytest.fixture
async def auth_headers(test_user) -> dict:
    """Generate auth headers for test user"""
    return bearer(test_user)
