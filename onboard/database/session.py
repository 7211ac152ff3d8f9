"""
Database session management and initialization.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
    AsyncEngine
)
from onboard.config import settings
from onboard.database.models import Base
from onboard.errors import OnboardError
from onboard.logger import get_logger

logger = get_logger(__name__)

# Create async engine
engine: AsyncEngine = create_async_engine(
    settings.DB_URL,
    echo=False,  # Set to True for SQL debugging
    future=True,
)

# Create session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db(target: Optional[AsyncEngine] = None) -> None:
    """Initialize database tables."""
    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized successfully")


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
    logger.info("Database connections closed")


@asynccontextmanager
async def get_session(
    factory: Optional[async_sessionmaker] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Get async database session."""
    async with (factory or async_session_maker)() as session:
        try:
            yield session
            await session.commit()
        except OnboardError:
            await session.rollback()
            raise
        except Exception as e:
            await session.rollback()
            logger.error("Database session error", error=str(e))
            raise


async def get_session_factory() -> async_sessionmaker:
    """Get session factory for dependency injection."""
    return async_session_maker
