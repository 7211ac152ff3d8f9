"""
Inline keyboards for the onboarding chat client.
"""
from typing import Iterable, Optional

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from onboard.core.id_generator import DEPARTMENTS
from onboard.core.record import OnboardingRecord
from onboard.core.session import EDIT_LOCKED_FIELDS, LAST_STEP

# Callback data prefixes
CALLBACK_CANCEL = "cancel"
CALLBACK_WIZARD = "wizard:"
CALLBACK_FIELD = "field:"
CALLBACK_DEPARTMENT = "dept:"
CALLBACK_EMPLOYEE = "emp:"
CALLBACK_EDIT = "edit:"
CALLBACK_DELETE = "delete:"
CALLBACK_CONFIRM_DELETE = "confirm_delete:"
CALLBACK_NEW_EMPLOYEE = "new_employee"
CALLBACK_LIST = "list"

WIZARD_NEXT = "next"
WIZARD_BACK = "back"
WIZARD_SUBMIT = "submit"

# Fields the user types in on each step; employee_id is generated
STEP_INPUT_FIELDS = {
    1: ("full_name", "email", "phone_number"),
    2: ("department", "role", "date_of_joining"),
    3: ("password", "confirm_password"),
}

FIELD_BUTTONS = {
    "full_name": "👤 Name",
    "email": "📧 Email",
    "phone_number": "📱 Phone",
    "department": "🏢 Department",
    "role": "💼 Role",
    "date_of_joining": "📅 Date",
    "password": "🔑 Password",
    "confirm_password": "🔑 Confirm",
}


def get_cancel_keyboard() -> InlineKeyboardMarkup:
    """Get cancel button for wizard."""
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="❌ Cancel", callback_data=CALLBACK_CANCEL)]
        ]
    )


def get_department_keyboard(selected: Optional[str] = None) -> InlineKeyboardMarkup:
    """Department picker; callback carries the index into DEPARTMENTS."""
    builder = InlineKeyboardBuilder()

    for index, name in enumerate(DEPARTMENTS):
        prefix = "✅ " if name == selected else ""
        builder.button(
            text=f"{prefix}{name}",
            callback_data=f"{CALLBACK_DEPARTMENT}{index}",
        )

    builder.adjust(2)
    builder.row(
        InlineKeyboardButton(text="❌ Cancel", callback_data=CALLBACK_CANCEL)
    )
    return builder.as_markup()


def get_step_keyboard(step: int, is_editing: bool = False) -> InlineKeyboardMarkup:
    """Field edit buttons plus navigation for the current step."""
    builder = InlineKeyboardBuilder()

    for name in STEP_INPUT_FIELDS[step]:
        if is_editing and name in EDIT_LOCKED_FIELDS:
            continue
        if name == "confirm_password":
            continue
        builder.button(
            text=f"✏️ {FIELD_BUTTONS[name]}",
            callback_data=f"{CALLBACK_FIELD}{name}",
        )
    builder.adjust(3)

    navigation = []
    if step > 1:
        navigation.append(
            InlineKeyboardButton(text="◀️ Back", callback_data=f"{CALLBACK_WIZARD}{WIZARD_BACK}")
        )
    if step < LAST_STEP:
        navigation.append(
            InlineKeyboardButton(text="Next ▶️", callback_data=f"{CALLBACK_WIZARD}{WIZARD_NEXT}")
        )
    else:
        label = "💾 Save changes" if is_editing else "✅ Submit"
        navigation.append(
            InlineKeyboardButton(text=label, callback_data=f"{CALLBACK_WIZARD}{WIZARD_SUBMIT}")
        )
    builder.row(*navigation)

    builder.row(
        InlineKeyboardButton(text="❌ Cancel", callback_data=CALLBACK_CANCEL)
    )
    return builder.as_markup()


def get_directory_keyboard(
    employees: Iterable[OnboardingRecord],
    can_manage: bool = False,
) -> InlineKeyboardMarkup:
    """One button per employee, plus refresh and new."""
    builder = InlineKeyboardBuilder()

    for employee in employees:
        builder.button(
            text=f"👤 {employee.full_name} ({employee.employee_id})",
            callback_data=f"{CALLBACK_EMPLOYEE}{employee.employee_id}",
        )
    builder.adjust(1)

    actions = [InlineKeyboardButton(text="🔄 Refresh", callback_data=CALLBACK_LIST)]
    if can_manage:
        actions.append(
            InlineKeyboardButton(text="➕ New employee", callback_data=CALLBACK_NEW_EMPLOYEE)
        )
    builder.row(*actions)
    return builder.as_markup()


def get_employee_keyboard(employee_id: str, can_manage: bool = False) -> InlineKeyboardMarkup:
    """Actions on a single employee card."""
    builder = InlineKeyboardBuilder()

    if can_manage:
        builder.row(
            InlineKeyboardButton(text="✏️ Edit", callback_data=f"{CALLBACK_EDIT}{employee_id}"),
            InlineKeyboardButton(text="🗑 Delete", callback_data=f"{CALLBACK_DELETE}{employee_id}"),
        )
    builder.row(
        InlineKeyboardButton(text="◀️ Back to list", callback_data=CALLBACK_LIST)
    )
    return builder.as_markup()


def get_delete_confirm_keyboard(employee_id: str) -> InlineKeyboardMarkup:
    """Get confirmation keyboard for deletion."""
    builder = InlineKeyboardBuilder()
    builder.button(
        text="🗑 Yes, delete",
        callback_data=f"{CALLBACK_CONFIRM_DELETE}{employee_id}",
    )
    builder.button(text="◀️ No", callback_data=f"{CALLBACK_EMPLOYEE}{employee_id}")
    builder.adjust(2)
    return builder.as_markup()
