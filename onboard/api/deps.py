"""Request dependencies: database session and API key check."""
import secrets
from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from onboard.config import settings
from onboard.database.session import get_session, get_session_factory

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def get_db_session(
    factory: async_sessionmaker = Depends(get_session_factory),
) -> AsyncGenerator[AsyncSession, None]:
    async with get_session(factory) as session:
        yield session


def require_api_key(key: Optional[str] = Depends(api_key_header)) -> Optional[str]:
    """No-op when API_KEY is unset; otherwise the header must match."""
    if not settings.API_KEY:
        return None
    if not key or not secrets.compare_digest(key, settings.API_KEY):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid API key")
    return key
