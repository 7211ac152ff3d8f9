"""
Main entry point for the onboarding chat bot.

The HTTP API runs separately: ``uvicorn onboard.api.app:app``.
"""
import asyncio
import signal
import sys
from typing import Set

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from onboard.config import settings
from onboard.database import init_db, close_db
from onboard.logger import configure_logging, get_logger
from onboard.handlers import auth, commands, directory, onboarding
from onboard.middlewares.context import LoggingMiddleware, UserContextMiddleware
from onboard.services.backend import DatabaseBackend

# Configure logging
configure_logging()
logger = get_logger(__name__)


# Global bot and dispatcher
bot: Bot = None
dp: Dispatcher = None


async def on_startup() -> None:
    """Actions to perform on startup."""
    logger.info("Starting onboarding bot...")

    # Initialize database
    await init_db()

    logger.info("Onboarding bot started successfully")


async def on_shutdown() -> None:
    """Actions to perform on shutdown."""
    logger.info("Shutting down onboarding bot...")

    # Close database
    await close_db()

    # Close bot session
    await bot.session.close()

    logger.info("Onboarding bot shutdown complete")


def make_signal_handler(dispatcher: Dispatcher, stopping: Set[asyncio.Task]):
    """Signal callback that stops polling; the task is kept in ``stopping``."""

    def signal_handler():
        logger.info("Received shutdown signal")
        stopping.add(asyncio.create_task(dispatcher.stop_polling()))

    return signal_handler


async def finish_stopping(stopping: Set[asyncio.Task]) -> None:
    """Collect stop-polling tasks started by signals."""
    while stopping:
        task = stopping.pop()
        try:
            await task
        except RuntimeError as e:
            logger.warning("Stop polling failed", error=str(e))


def setup_handlers() -> None:
    """Setup middlewares and handlers."""
    global dp
    dp = Dispatcher()

    context = UserContextMiddleware(DatabaseBackend())
    for observer in (dp.message, dp.callback_query):
        observer.outer_middleware(LoggingMiddleware())
        observer.outer_middleware(context)

    # Commands first so /cancel works inside any dialog
    dp.include_router(commands.router)
    dp.include_router(auth.router)
    dp.include_router(onboarding.router)
    dp.include_router(directory.router)

    logger.info("Handlers registered")


async def main() -> None:
    """Main function."""
    global bot

    # Validate configuration
    if not settings.BOT_TOKEN:
        logger.error("BOT_TOKEN is not set!")
        sys.exit(1)

    if not settings.allowed_creators_list and not settings.admin_ids_list:
        logger.warning("ALLOWED_CREATORS and ADMIN_IDS are empty, nobody can onboard employees")

    # Create bot instance
    bot = Bot(
        token=settings.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )

    setup_handlers()

    await on_startup()

    loop = asyncio.get_running_loop()
    stopping: Set[asyncio.Task] = set()
    signal_handler = make_signal_handler(dp, stopping)

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    try:
        logger.info("Starting polling...")
        await dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types(),
            handle_signals=False,
        )
    except asyncio.CancelledError:
        logger.info("Polling cancelled")
    finally:
        await finish_stopping(stopping)
        await on_shutdown()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.error("Fatal error", error=str(e), exc_info=True)
        sys.exit(1)
