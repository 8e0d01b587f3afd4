from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from typing import AsyncGenerator
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

# Async Engine
async_engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    future=True,
    pool_pre_ping=True,
    pool_size=10,
    max_overflow=20
)

# Async Session Factory
AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

Base = declarative_base()


async def init_db():
    """Create tables and seed reference data"""
    # Models must be imported so their tables are registered on Base.metadata
    from app.modules.users import models as _users  # noqa: F401
    from app.modules.loans import models as _loans  # noqa: F401
    from app.modules.cards import models as _cards  # noqa: F401
    from app.modules.employees.services import EmployeeService

    async with async_engine.begin() as conn:
        # Create all tables (for development - use Alembic in production)
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        await EmployeeService.seed_defaults(session)

    logger.info("Database initialized")


async def close_db():
    """Dispose of the engine's connection pool"""
    await async_engine.dispose()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
