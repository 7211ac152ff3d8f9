"""
Handler for /login and /logout.
"""
from html import escape

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from onboard.core.auth_flow import sign_in, sign_out
from onboard.core.backend import EmployeeBackend
from onboard.core.session import UserContext
from onboard.errors import ErrorKind
from onboard.keyboards.inline import get_cancel_keyboard
from onboard.logger import get_logger
from onboard.states.onboarding import LoginStates
from onboard.utils.formatting import format_notice, format_signed_in

logger = get_logger(__name__)

router = Router()


@router.message(Command("login"))
async def cmd_login(message: Message, state: FSMContext, user_ctx: UserContext):
    """Ask for an email or employee ID."""
    if user_ctx.auth.is_authenticated:
        name = user_ctx.auth.employee.get("full_name") or ""
        await message.answer(
            f"✅ You are already signed in as {escape(name)}.\n"
            "Use /logout to switch accounts."
        )
        return

    await state.clear()
    await message.answer(
        "🔐 Enter your email or employee ID:",
        reply_markup=get_cancel_keyboard(),
    )
    await state.set_state(LoginStates.identifier)


@router.message(LoginStates.identifier, F.text)
async def process_identifier(message: Message, state: FSMContext):
    identifier = message.text.strip()
    if not identifier:
        await message.answer("❌ Please enter your email or employee ID:")
        return

    await state.update_data(identifier=identifier)
    await message.answer("🔑 Enter your password:", reply_markup=get_cancel_keyboard())
    await state.set_state(LoginStates.password)


@router.message(LoginStates.password, F.text)
async def process_password(
    message: Message,
    state: FSMContext,
    user_ctx: UserContext,
    backend: EmployeeBackend,
):
    """Sign in; the password message is removed from the chat."""
    password = message.text
    try:
        await message.delete()
    except TelegramBadRequest as e:
        logger.warning("Could not delete password message", error=str(e))

    data = await state.get_data()
    await state.clear()

    outcome = await sign_in(backend, user_ctx.auth, data.get("identifier", ""), password)
    if not outcome.ok:
        icon = "⏳" if outcome.kind == ErrorKind.NOT_ACTIVATED else "❌"
        await message.answer(f"{format_notice(icon, outcome.message)}\n\nTry again with /login.")
        return

    employee = outcome.data
    await message.answer(format_signed_in(outcome.message, employee), parse_mode="HTML")
    logger.info(
        "Chat user signed in",
        user_id=message.from_user.id,
        employee_id=employee.get("employee_id"),
    )


@router.message(Command("logout"))
async def cmd_logout(message: Message, state: FSMContext, user_ctx: UserContext):
    await state.clear()
    outcome = sign_out(user_ctx.auth)
    await message.answer(format_notice("👋", outcome.message))
