"""
Middlewares for the onboarding chat client.
"""
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, User

from onboard.config import settings
from onboard.core.backend import EmployeeBackend
from onboard.core.directory import EmployeeDirectory
from onboard.core.session import UserContext
from onboard.core.wizard import OnboardingWizard
from onboard.logger import get_logger

logger = get_logger(__name__)


class UserContextMiddleware(BaseMiddleware):
    """
    Injects a per-user ``UserContext`` and the objects built on it.

    Handlers receive ``user_ctx``, ``wizard``, ``directory``, ``backend``,
    ``is_admin`` and ``is_creator``.
    """

    def __init__(self, backend: EmployeeBackend):
        self.backend = backend
        self.contexts: Dict[int, UserContext] = {}
        self.directories: Dict[int, EmployeeDirectory] = {}

    def context_for(self, user_id: int) -> UserContext:
        if user_id not in self.contexts:
            self.contexts[user_id] = UserContext()
            logger.debug("User context created", user_id=user_id)
        return self.contexts[user_id]

    def directory_for(self, user_id: int) -> EmployeeDirectory:
        if user_id not in self.directories:
            ctx = self.context_for(user_id)
            self.directories[user_id] = EmployeeDirectory(self.backend, ctx.wizard)
        return self.directories[user_id]

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        user: User = data.get("event_from_user")

        data["backend"] = self.backend
        if user:
            ctx = self.context_for(user.id)
            data["user_ctx"] = ctx
            data["wizard"] = OnboardingWizard(ctx.wizard, self.backend)
            data["directory"] = self.directory_for(user.id)
            data["is_admin"] = is_admin(user.id)
            data["is_creator"] = is_allowed_creator(user.id)

        return await handler(event, data)


class LoggingMiddleware(BaseMiddleware):
    """Middleware for logging all updates."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        user: User = data.get("event_from_user")

        if user:
            logger.debug(
                "Update received",
                user_id=user.id,
                username=user.username,
                update_type=type(event).__name__,
            )

        return await handler(event, data)


def is_allowed_creator(user_id: int) -> bool:
    """Check if user may onboard and edit employees."""
    return user_id in settings.allowed_creators_list


def is_admin(user_id: int) -> bool:
    return user_id in settings.admin_ids_list


def can_manage(is_admin: bool, is_creator: bool) -> bool:
    return is_admin or is_creator
