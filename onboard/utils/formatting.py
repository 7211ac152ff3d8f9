"""
Message formatting for the chat client.
"""
from html import escape
from typing import Dict, Iterable, Optional

from onboard.core.record import OnboardingRecord
from onboard.core.session import LAST_STEP
from onboard.core.wizard import STEP_TITLES, OnboardingWizard
from onboard.utils.date_utils import format_date

FIELD_LABELS = {
    "full_name": "Full name",
    "email": "Email",
    "phone_number": "Phone number",
    "department": "Department",
    "role": "Role",
    "date_of_joining": "Date of joining",
    "employee_id": "Employee ID",
    "password": "Password",
    "confirm_password": "Confirm password",
}

FIELD_ICONS = {
    "full_name": "👤",
    "email": "📧",
    "phone_number": "📱",
    "department": "🏢",
    "role": "💼",
    "date_of_joining": "📅",
    "employee_id": "🆔",
    "password": "🔑",
    "confirm_password": "🔑",
}


def _value(text: Optional[str]) -> str:
    return escape(text) if text else "<i>not set</i>"


def format_field_errors(errors: Dict[str, str]) -> str:
    """One line per invalid field."""
    return "\n".join(
        f"❌ {FIELD_LABELS.get(name, name)}: {escape(message)}"
        for name, message in errors.items()
    )


def format_step_card(wizard: OnboardingWizard, errors: Optional[Dict[str, str]] = None) -> str:
    """Summary of the current wizard step with its entered values."""
    step = wizard.current_step
    record = wizard.record
    mode = "✏️ Editing" if wizard.session.is_editing_mode else "🎯 New employee"

    lines = [
        f"{mode}: <b>Step {step}/{LAST_STEP}: {STEP_TITLES[step]}</b>",
        "",
    ]

    if step == 1:
        lines += [
            f"👤 <b>Full name:</b> {_value(record.full_name)}",
            f"📧 <b>Email:</b> {_value(record.email)}",
            f"📱 <b>Phone number:</b> {_value(record.phone_number)}",
        ]
    elif step == 2:
        lines += [
            f"🏢 <b>Department:</b> {_value(record.department)}",
            f"💼 <b>Role:</b> {_value(record.role)}",
            f"📅 <b>Date of joining:</b> {_value(record.date_of_joining)}",
        ]
    else:
        password_state = "set" if record.password else "not set"
        if wizard.session.is_editing_mode and not record.password:
            password_state = "unchanged"
        lines += [
            f"🆔 <b>Employee ID:</b> <code>{_value(record.employee_id)}</code>",
            f"🔑 <b>Password:</b> {password_state}",
            "",
            f"👤 {_value(record.full_name)} · {_value(record.email)}",
            f"🏢 {_value(record.department)} · {_value(record.role)}",
        ]

    if errors:
        lines += ["", format_field_errors(errors)]

    return "\n".join(lines)


def format_employee_card(record: OnboardingRecord) -> str:
    """Full card for a single employee."""
    return "\n".join(
        [
            f"👤 <b>{escape(record.full_name)}</b>",
            f"🆔 <code>{escape(record.employee_id)}</code>",
            "",
            f"📧 <b>Email:</b> {escape(record.email)}",
            f"📱 <b>Phone:</b> {escape(record.phone_number)}",
            f"🏢 <b>Department:</b> {escape(record.department)}",
            f"💼 <b>Role:</b> {escape(record.role)}",
            f"📅 <b>Joined:</b> {format_date(record.date_of_joining)}",
        ]
    )


def format_employee_list_item(record: OnboardingRecord) -> str:
    return (
        f"• <code>{escape(record.employee_id)}</code> "
        f"{escape(record.full_name)} ({escape(record.role)}, {escape(record.department)})"
    )


def format_employee_list(records: Iterable[OnboardingRecord]) -> str:
    records = list(records)
    if not records:
        return "📭 No employees yet. Use /onboard to add the first one."

    lines = [f"👥 <b>Employees ({len(records)})</b>", ""]
    lines += [format_employee_list_item(r) for r in records]
    return "\n".join(lines)


def format_notice(icon: str, message: str) -> str:
    """Single status line; the message may carry user-entered names."""
    return f"{icon} {escape(message)}"


def format_saved_employee(message: str, record: OnboardingRecord) -> str:
    """Confirmation shown after the wizard saved a record."""
    return "\n".join(
        [
            f"✅ <b>{escape(message)}</b>",
            "",
            f"👤 {escape(record.full_name)}",
            f"🆔 <code>{escape(record.employee_id)}</code>",
            "",
            "Use /employees to see the directory.",
        ]
    )


def format_signed_in(message: str, employee: Dict[str, str]) -> str:
    return "\n".join(
        [
            format_notice("✅", message),
            "",
            f"🆔 <code>{escape(employee.get('employee_id') or '')}</code>",
            f"💼 {_value(employee.get('role'))}, {_value(employee.get('department'))}",
        ]
    )
