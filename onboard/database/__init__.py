"""
Database module for the onboarding service.
"""
from onboard.database.models import (
    Base,
    Employee,
    AuthUser,
)
from onboard.database.session import (
    engine,
    async_session_maker,
    init_db,
    close_db,
    get_session,
    get_session_factory,
)

__all__ = [
    "Base",
    "Employee",
    "AuthUser",
    "engine",
    "async_session_maker",
    "init_db",
    "close_db",
    "get_session",
    "get_session_factory",
]
