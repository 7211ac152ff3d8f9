"""
Handler for /employees and directory buttons (view, edit, delete).
"""
from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from onboard.core.backend import EmployeeBackend
from onboard.core.directory import EmployeeDirectory
from onboard.core.outcome import Outcome
from onboard.core.session import UserContext
from onboard.core.wizard import OnboardingWizard
from onboard.errors import ErrorKind, NotFoundError
from onboard.handlers.onboarding import start_edit, start_wizard
from onboard.keyboards.inline import (
    CALLBACK_CONFIRM_DELETE,
    CALLBACK_DELETE,
    CALLBACK_EDIT,
    CALLBACK_EMPLOYEE,
    CALLBACK_LIST,
    CALLBACK_NEW_EMPLOYEE,
    get_delete_confirm_keyboard,
    get_directory_keyboard,
    get_employee_keyboard,
)
from onboard.logger import get_logger
from onboard.middlewares.context import can_manage
from onboard.utils.formatting import (
    format_employee_card,
    format_employee_list,
    format_notice,
)

logger = get_logger(__name__)

router = Router()

# Telegram caps a message at 100 inline buttons
MAX_LISTED = 50


# --- Helper Functions ---

def may_view(user_ctx: UserContext, is_admin: bool, is_creator: bool) -> bool:
    """Signed-in employees and managers may browse the directory."""
    return user_ctx.auth.is_authenticated or can_manage(is_admin, is_creator)


def render_list(directory: EmployeeDirectory, manage: bool):
    """Text and keyboard for the last fetched list."""
    if directory.error:
        return format_notice("⚠️", directory.error), get_directory_keyboard([], can_manage=False)

    employees = directory.employees
    text = format_employee_list(employees[:MAX_LISTED])
    if len(employees) > MAX_LISTED:
        text += f"\n\n... and {len(employees) - MAX_LISTED} more"
    return text, get_directory_keyboard(employees[:MAX_LISTED], can_manage=manage)


# --- List Command ---

@router.message(Command("employees"))
async def cmd_employees(
    message: Message,
    user_ctx: UserContext,
    directory: EmployeeDirectory,
    is_admin: bool = False,
    is_creator: bool = False,
):
    """Show the employee directory."""
    if not may_view(user_ctx, is_admin, is_creator):
        await message.answer("🔒 Please /login to view the employee directory.")
        return

    await directory.list()
    text, markup = render_list(directory, can_manage(is_admin, is_creator))
    await message.answer(text, reply_markup=markup, parse_mode="HTML")


@router.callback_query(F.data == CALLBACK_LIST)
async def show_list(
    callback: CallbackQuery,
    user_ctx: UserContext,
    directory: EmployeeDirectory,
    is_admin: bool = False,
    is_creator: bool = False,
):
    """Refresh the list in place."""
    if not may_view(user_ctx, is_admin, is_creator):
        await callback.answer("🔒 Please /login first", show_alert=True)
        return

    await directory.list()
    text, markup = render_list(directory, can_manage(is_admin, is_creator))
    await callback.message.edit_text(text, reply_markup=markup, parse_mode="HTML")
    await callback.answer()


# --- Employee Card ---

@router.callback_query(F.data.startswith(CALLBACK_EMPLOYEE))
async def show_employee(
    callback: CallbackQuery,
    user_ctx: UserContext,
    directory: EmployeeDirectory,
    is_admin: bool = False,
    is_creator: bool = False,
):
    if not may_view(user_ctx, is_admin, is_creator):
        await callback.answer("🔒 Please /login first", show_alert=True)
        return

    employee_id = callback.data[len(CALLBACK_EMPLOYEE):]
    record = directory.find(employee_id)
    if record is None:
        await callback.answer(
            f"❌ Employee {employee_id} was not found. Refresh the list.",
            show_alert=True,
        )
        return

    await callback.message.edit_text(
        format_employee_card(record),
        reply_markup=get_employee_keyboard(employee_id, can_manage(is_admin, is_creator)),
        parse_mode="HTML",
    )
    await callback.answer()


# --- New / Edit ---

@router.callback_query(F.data == CALLBACK_NEW_EMPLOYEE)
async def new_employee(
    callback: CallbackQuery,
    state: FSMContext,
    wizard: OnboardingWizard,
    directory: EmployeeDirectory,
    is_admin: bool = False,
    is_creator: bool = False,
):
    if not can_manage(is_admin, is_creator):
        await callback.answer("⛔ Only HR can onboard employees", show_alert=True)
        return

    directory.create()
    await start_wizard(callback.message, state, wizard)
    await callback.answer()


@router.callback_query(F.data.startswith(CALLBACK_EDIT))
async def edit_employee(
    callback: CallbackQuery,
    state: FSMContext,
    wizard: OnboardingWizard,
    directory: EmployeeDirectory,
    backend: EmployeeBackend,
    is_admin: bool = False,
    is_creator: bool = False,
):
    """Load the latest copy of the record into the wizard in edit mode."""
    if not can_manage(is_admin, is_creator):
        await callback.answer("⛔ Only HR can edit employees", show_alert=True)
        return

    employee_id = callback.data[len(CALLBACK_EDIT):]
    try:
        record = await backend.get_employee(employee_id)
    except NotFoundError:
        await callback.answer(
            f"❌ Employee {employee_id} was not found. Refresh the list.",
            show_alert=True,
        )
        return
    except Exception as e:
        logger.warning("Failed to load employee for edit", employee_id=employee_id, error=str(e))
        await callback.answer(Outcome.from_error(e).message, show_alert=True)
        return

    directory.edit(record)
    await start_edit(callback.message, state, wizard)
    await callback.answer()
    logger.info("Employee edit started", employee_id=employee_id, user_id=callback.from_user.id)


# --- Delete ---

@router.callback_query(F.data.startswith(CALLBACK_DELETE))
async def delete_employee(
    callback: CallbackQuery,
    directory: EmployeeDirectory,
    is_admin: bool = False,
    is_creator: bool = False,
):
    """First press only asks for confirmation."""
    if not can_manage(is_admin, is_creator):
        await callback.answer("⛔ Only HR can delete employees", show_alert=True)
        return

    employee_id = callback.data[len(CALLBACK_DELETE):]
    outcome = await directory.delete(employee_id, confirmed=False)
    await callback.message.edit_text(
        format_notice("⚠️", outcome.message),
        reply_markup=get_delete_confirm_keyboard(employee_id),
    )
    await callback.answer()


@router.callback_query(F.data.startswith(CALLBACK_CONFIRM_DELETE))
async def confirm_delete_employee(
    callback: CallbackQuery,
    directory: EmployeeDirectory,
    is_admin: bool = False,
    is_creator: bool = False,
):
    if not can_manage(is_admin, is_creator):
        await callback.answer("⛔ Only HR can delete employees", show_alert=True)
        return

    employee_id = callback.data[len(CALLBACK_CONFIRM_DELETE):]
    outcome = await directory.delete(employee_id, confirmed=True)

    if not outcome.ok and outcome.kind == ErrorKind.BUSY:
        await callback.answer(f"⏳ {outcome.message}", show_alert=True)
        return

    if outcome.ok:
        prefix = format_notice("✅", outcome.message) + "\n\n"
    else:
        prefix = format_notice("❌", outcome.message) + "\n\n"
        if outcome.kind == ErrorKind.NOT_FOUND:
            await directory.list()

    text, markup = render_list(directory, can_manage(is_admin, is_creator))
    await callback.message.edit_text(prefix + text, reply_markup=markup, parse_mode="HTML")
    await callback.answer()
