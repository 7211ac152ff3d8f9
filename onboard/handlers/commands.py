"""
Handler for general commands (/start, /help, /cancel).
"""
from html import escape

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from onboard.core.session import UserContext
from onboard.core.wizard import OnboardingWizard
from onboard.logger import get_logger
from onboard.middlewares.context import can_manage

logger = get_logger(__name__)

router = Router()


# --- Start Command ---

@router.message(CommandStart())
async def cmd_start(message: Message, user_ctx: UserContext):
    """Greet the user and show who is signed in."""
    if user_ctx.auth.is_authenticated:
        name = user_ctx.auth.employee.get("full_name") or ""
        status = f"✅ Signed in as <b>{escape(name)}</b>"
    else:
        status = "🔒 Not signed in. Use /login."

    await message.answer(
        "👋 <b>Employee Onboarding</b>\n\n"
        "I help HR onboard new employees and keep the employee directory.\n\n"
        f"{status}\n\n"
        "Send /help for the list of commands.",
        parse_mode="HTML",
    )


# --- Help Command ---

@router.message(Command("help"))
async def cmd_help(message: Message, is_admin: bool = False, is_creator: bool = False):
    """Show help message."""
    help_text = """
📚 <b>Onboarding bot help</b>

<b>Commands:</b>

/login — Sign in with your email or employee ID
/logout — Sign out
/employees — Employee directory (signed-in users)
/cancel — Cancel the current action
/help — This help
"""

    if can_manage(is_admin, is_creator):
        help_text += """
<b>HR commands:</b>

/onboard — Onboard a new employee in three steps:
  1️⃣ Basic Info: name, email, phone
  2️⃣ Job Details: department, role, date of joining
  3️⃣ Account Setup: employee ID and password

The employee ID is generated from the joining year and department,
for example <code>24ENG1234</code>. Edit and delete employees from /employees.
"""

    await message.answer(help_text, parse_mode="HTML")


# --- Cancel Command ---

@router.message(Command("cancel"))
async def cmd_cancel(message: Message, state: FSMContext, wizard: OnboardingWizard):
    """Cancel whatever dialog is in progress."""
    current = await state.get_state()
    wizard.start_new()
    await state.clear()

    if current is None:
        await message.answer("Nothing to cancel.")
        return

    await message.answer("❌ Cancelled.")
    logger.info("Dialog cancelled", user_id=message.from_user.id, state=current)
