"""
Handler for /onboard and the three-step wizard.
"""
from typing import Optional

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from onboard.core.id_generator import DEPARTMENTS, ROLE_SUGGESTIONS
from onboard.core.outcome import Outcome
from onboard.core.wizard import OnboardingWizard
from onboard.errors import ErrorKind
from onboard.keyboards.inline import (
    CALLBACK_CANCEL,
    CALLBACK_DEPARTMENT,
    CALLBACK_FIELD,
    CALLBACK_WIZARD,
    STEP_INPUT_FIELDS,
    WIZARD_BACK,
    WIZARD_NEXT,
    WIZARD_SUBMIT,
    get_cancel_keyboard,
    get_department_keyboard,
    get_step_keyboard,
)
from onboard.logger import get_logger
from onboard.middlewares.context import can_manage
from onboard.states.onboarding import OnboardingStates
from onboard.utils.formatting import (
    format_field_errors,
    format_notice,
    format_saved_employee,
    format_step_card,
)

logger = get_logger(__name__)

router = Router()

FIELD_PROMPTS = {
    "full_name": "👤 Enter the employee's full name:",
    "email": "📧 Enter the work email:",
    "phone_number": "📱 Enter the phone number:",
    "department": "🏢 Choose the department:",
    "role": "💼 Enter the role.\n\n💡 For example: " + ", ".join(ROLE_SUGGESTIONS),
    "date_of_joining": "📅 Enter the date of joining (format: YYYY-MM-DD):",
    "password": (
        "🔑 Enter a password for the employee account.\n"
        "At least 8 characters with uppercase, lowercase, number and special character."
    ),
    "confirm_password": "🔑 Repeat the password:",
}

EDIT_PASSWORD_HINT = "\n\nSend '-' to keep the current password."

# Values that leave the password unchanged in edit mode
KEEP_PASSWORD = {"-", "skip"}


# --- Helper Functions ---

def missing_fields(wizard: OnboardingWizard) -> list:
    """Input fields on the current step that still need a value."""
    record = wizard.record
    editing = wizard.session.is_editing_mode
    missing = []
    for name in STEP_INPUT_FIELDS[wizard.current_step]:
        if editing and name == "department":
            continue
        if name == "password" and editing:
            continue
        if name == "confirm_password" and not record.password and editing:
            continue
        if not getattr(record, name):
            missing.append(name)
    return missing


async def ask_field(
    message: Message,
    state: FSMContext,
    wizard: OnboardingWizard,
    name: str,
    edit: bool = False,
) -> None:
    """Prompt for one field and switch the FSM to it."""
    text = FIELD_PROMPTS[name]
    if name == "password" and wizard.session.is_editing_mode:
        text += EDIT_PASSWORD_HINT

    if name == "department":
        markup = get_department_keyboard(wizard.record.department)
    else:
        markup = get_cancel_keyboard()

    if edit:
        await message.edit_text(text, reply_markup=markup)
    else:
        await message.answer(text, reply_markup=markup)
    await state.set_state(getattr(OnboardingStates, name))


async def show_step(
    message: Message,
    state: FSMContext,
    wizard: OnboardingWizard,
    errors: Optional[dict] = None,
    edit: bool = False,
) -> None:
    """Show the step card with edit and navigation buttons."""
    text = format_step_card(wizard, errors)
    markup = get_step_keyboard(wizard.current_step, wizard.session.is_editing_mode)

    if edit:
        try:
            await message.edit_text(text, reply_markup=markup, parse_mode="HTML")
        except TelegramBadRequest as e:
            if "message is not modified" not in str(e):
                raise
    else:
        await message.answer(text, reply_markup=markup, parse_mode="HTML")
    await state.set_state(OnboardingStates.review)


async def continue_step(
    message: Message,
    state: FSMContext,
    wizard: OnboardingWizard,
    edit: bool = False,
) -> None:
    """Ask for the next empty field, or show the card once the step is filled."""
    missing = missing_fields(wizard)
    if missing:
        await ask_field(message, state, wizard, missing[0], edit=edit)
    else:
        await show_step(message, state, wizard, edit=edit)


async def apply_input(
    message: Message,
    state: FSMContext,
    wizard: OnboardingWizard,
    name: str,
    value: str,
) -> None:
    """Store a typed value, re-prompt on a field error, otherwise move on."""
    outcome = wizard.update(**{name: value})
    if not outcome.ok:
        await message.answer(format_notice("⛔", outcome.message))
        await show_step(message, state, wizard)
        return

    error = wizard.step_errors().get(name)
    if error:
        await message.answer(
            format_notice("❌", error) + "\nPlease try again:",
            reply_markup=get_cancel_keyboard(),
        )
        return

    await continue_step(message, state, wizard)


async def delete_secret(message: Message) -> None:
    """Remove a message that contains a password from the chat history."""
    try:
        await message.delete()
    except TelegramBadRequest as e:
        logger.warning("Could not delete password message", error=str(e))


def outcome_text(outcome: Outcome) -> str:
    text = format_notice("❌", outcome.message)
    if outcome.field_errors:
        text += "\n\n" + format_field_errors(outcome.field_errors)
    return text


async def start_wizard(
    message: Message,
    state: FSMContext,
    wizard: OnboardingWizard,
) -> None:
    """Begin a fresh onboarding at step 1."""
    wizard.start_new()
    await state.clear()
    await message.answer(
        "🎯 <b>New employee onboarding</b>\n\n"
        "Three steps: Basic Info, Job Details and Account Setup.\n"
        "You can cancel at any time with the button below or /cancel.",
        parse_mode="HTML",
    )
    await continue_step(message, state, wizard)


async def start_edit(message: Message, state: FSMContext, wizard: OnboardingWizard) -> None:
    """Wizard already loaded in edit mode; show the pre-filled first step."""
    await state.clear()
    await show_step(message, state, wizard, edit=True)


# --- Command Handler ---

@router.message(Command("onboard"))
async def cmd_onboard(
    message: Message,
    state: FSMContext,
    wizard: OnboardingWizard,
    is_admin: bool = False,
    is_creator: bool = False,
):
    """Start the onboarding wizard."""
    if not can_manage(is_admin, is_creator):
        await message.answer(
            "⛔ You are not allowed to onboard employees.\n"
            "Ask an administrator for access."
        )
        return

    await start_wizard(message, state, wizard)
    logger.info("Onboarding wizard started", user_id=message.from_user.id)


# --- Cancel Handler ---

@router.callback_query(F.data == CALLBACK_CANCEL)
async def cancel_wizard(callback: CallbackQuery, state: FSMContext, wizard: OnboardingWizard):
    """Cancel the current dialog and drop any wizard draft."""
    wizard.start_new()
    await state.clear()
    await callback.message.edit_text("❌ Cancelled.")
    await callback.answer()
    logger.info("Wizard cancelled", user_id=callback.from_user.id)


# --- Text Input Handlers ---

@router.message(OnboardingStates.full_name, F.text)
async def process_full_name(message: Message, state: FSMContext, wizard: OnboardingWizard):
    await apply_input(message, state, wizard, "full_name", message.text.strip())


@router.message(OnboardingStates.email, F.text)
async def process_email(message: Message, state: FSMContext, wizard: OnboardingWizard):
    await apply_input(message, state, wizard, "email", message.text.strip())


@router.message(OnboardingStates.phone_number, F.text)
async def process_phone_number(message: Message, state: FSMContext, wizard: OnboardingWizard):
    await apply_input(message, state, wizard, "phone_number", message.text.strip())


@router.message(OnboardingStates.role, F.text)
async def process_role(message: Message, state: FSMContext, wizard: OnboardingWizard):
    await apply_input(message, state, wizard, "role", message.text.strip())


@router.message(OnboardingStates.date_of_joining, F.text)
async def process_date_of_joining(message: Message, state: FSMContext, wizard: OnboardingWizard):
    await apply_input(message, state, wizard, "date_of_joining", message.text.strip())


@router.message(OnboardingStates.password, F.text)
async def process_password(message: Message, state: FSMContext, wizard: OnboardingWizard):
    """Password messages are removed from the chat once read."""
    value = message.text
    await delete_secret(message)

    if wizard.session.is_editing_mode and value.strip().lower() in KEEP_PASSWORD:
        wizard.update(password="", confirm_password="")
        await show_step(message, state, wizard)
        return

    # A new password always needs a fresh confirmation
    wizard.update(confirm_password="")
    await apply_input(message, state, wizard, "password", value)


@router.message(OnboardingStates.confirm_password, F.text)
async def process_confirm_password(message: Message, state: FSMContext, wizard: OnboardingWizard):
    value = message.text
    await delete_secret(message)

    wizard.update(confirm_password=value)
    error = wizard.step_errors().get("confirm_password")
    if error:
        wizard.update(password="", confirm_password="")
        await message.answer(format_notice("❌", f"{error} Let's try again."))
        await ask_field(message, state, wizard, "password")
        return

    await show_step(message, state, wizard)


# --- Department Picker ---

@router.callback_query(OnboardingStates.department, F.data.startswith(CALLBACK_DEPARTMENT))
async def process_department(callback: CallbackQuery, state: FSMContext, wizard: OnboardingWizard):
    """Department comes from the keyboard; a change regenerates the draft ID."""
    try:
        department = DEPARTMENTS[int(callback.data[len(CALLBACK_DEPARTMENT):])]
    except (ValueError, IndexError):
        await callback.answer("❌ Unknown department", show_alert=True)
        return

    outcome = wizard.update(department=department)
    if not outcome.ok:
        await callback.answer(outcome.message, show_alert=True)
        return

    await continue_step(callback.message, state, wizard, edit=True)
    await callback.answer(f"🏢 {department}")


# --- Step Card Buttons ---

@router.callback_query(OnboardingStates.review, F.data.startswith(CALLBACK_FIELD))
async def process_field_edit(callback: CallbackQuery, state: FSMContext, wizard: OnboardingWizard):
    """Re-enter a single field from the step card."""
    name = callback.data[len(CALLBACK_FIELD):]
    if name not in STEP_INPUT_FIELDS[wizard.current_step]:
        await callback.answer("❌ This field is not on the current step", show_alert=True)
        return

    await ask_field(callback.message, state, wizard, name, edit=True)
    await callback.answer()


@router.callback_query(OnboardingStates.review, F.data == f"{CALLBACK_WIZARD}{WIZARD_NEXT}")
async def process_next(callback: CallbackQuery, state: FSMContext, wizard: OnboardingWizard):
    outcome = wizard.next()
    if not outcome.ok:
        await callback.answer(outcome.message, show_alert=True)
        await show_step(callback.message, state, wizard, errors=outcome.field_errors, edit=True)
        return

    await continue_step(callback.message, state, wizard, edit=True)
    await callback.answer()


@router.callback_query(OnboardingStates.review, F.data == f"{CALLBACK_WIZARD}{WIZARD_BACK}")
async def process_back(callback: CallbackQuery, state: FSMContext, wizard: OnboardingWizard):
    """Previous step with its data kept."""
    outcome = wizard.back()
    if not outcome.ok:
        await callback.answer(outcome.message, show_alert=True)
        return

    await show_step(callback.message, state, wizard, edit=True)
    await callback.answer()


@router.callback_query(OnboardingStates.review, F.data == f"{CALLBACK_WIZARD}{WIZARD_SUBMIT}")
async def process_submit(callback: CallbackQuery, state: FSMContext, wizard: OnboardingWizard):
    """Create or update the employee; stays on the card when it fails."""
    outcome = await wizard.submit()

    if not outcome.ok:
        if outcome.kind == ErrorKind.BUSY:
            await callback.answer(f"⏳ {outcome.message}", show_alert=True)
            return
        await callback.answer(outcome.message, show_alert=True)
        await show_step(callback.message, state, wizard, errors=outcome.field_errors, edit=True)
        if not outcome.field_errors:
            await callback.message.answer(outcome_text(outcome))
        return

    saved = outcome.data
    await state.clear()
    await callback.message.edit_text(
        format_saved_employee(outcome.message, saved),
        parse_mode="HTML",
    )
    await callback.answer()

    logger.info(
        "Employee saved from chat",
        employee_id=saved.employee_id,
        user_id=callback.from_user.id,
    )
