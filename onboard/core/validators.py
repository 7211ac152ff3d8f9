"""
Field validators for the onboarding wizard.

Every validator takes the raw value and returns ``None`` when it is valid or
a short message describing the problem. Validators never raise.
"""
import re
from datetime import date
from typing import Dict, Optional

from onboard.config import settings
from onboard.core.id_generator import DEPARTMENTS
from onboard.core.record import OnboardingRecord
from onboard.utils.date_utils import MIN_JOINING_DATE, get_today, parse_date

EMAIL_RE = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)

STEP_FIELDS = {
    1: ("full_name", "email", "phone_number"),
    2: ("department", "role", "date_of_joining"),
    3: ("employee_id", "password", "confirm_password"),
}


def validate_full_name(value: str) -> Optional[str]:
    value = (value or "").strip()
    if not value:
        return "Full name is required."
    if len(value) > 255:
        return "Full name is too long (255 characters max)."
    return None


def validate_email(value: str) -> Optional[str]:
    value = (value or "").strip()
    if not value:
        return "Email is required."
    if not EMAIL_RE.match(value):
        return "Invalid email address."
    return None


def validate_phone(value: str, pattern: Optional[str] = None) -> Optional[str]:
    """Check the number against the configured regional pattern."""
    value = (value or "").strip()
    if not value:
        return "Phone number is required."
    if not re.match(pattern or settings.PHONE_PATTERN, value):
        return "Invalid phone number."
    return None


def validate_department(value: str) -> Optional[str]:
    if not value:
        return "Department is required."
    if value not in DEPARTMENTS:
        return "Unknown department."
    return None


def validate_role(value: str) -> Optional[str]:
    if not (value or "").strip():
        return "Role is required."
    return None


def validate_date_of_joining(value: str, today: Optional[date] = None) -> Optional[str]:
    if not (value or "").strip():
        return "Date of joining is required."
    parsed = parse_date(value)
    if parsed is None:
        return "Date of joining must be a valid date (YYYY-MM-DD)."
    if parsed < MIN_JOINING_DATE:
        return "Date of joining is too far in the past."
    if parsed > (today or get_today()):
        return "Date of joining cannot be in the future."
    return None


def validate_password(value: str, editing: bool = False) -> Optional[str]:
    """
    Strength rule: minimum length plus lowercase, uppercase, digit and symbol.
    In edit mode an empty password means "keep the current one".
    """
    if not value:
        return None if editing else "Password is required."
    if len(value) < settings.PASSWORD_MIN_LENGTH:
        return f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters."
    if not (
        re.search(r"[a-z]", value)
        and re.search(r"[A-Z]", value)
        and re.search(r"\d", value)
        and re.search(r"[^A-Za-z0-9]", value)
    ):
        return "Password must include uppercase, lowercase, number, and special character."
    return None


def validate_confirm_password(password: str, confirm_password: str) -> Optional[str]:
    if not password:
        return None
    if confirm_password != password:
        return "Passwords do not match."
    return None


def validate_step(step: int, record: OnboardingRecord, editing: bool = False) -> Dict[str, str]:
    """Run every validator of a wizard step; returns ``{field: message}``."""
    errors: Dict[str, Optional[str]] = {}

    if step == 1:
        errors["full_name"] = validate_full_name(record.full_name)
        errors["email"] = validate_email(record.email)
        errors["phone_number"] = validate_phone(record.phone_number)
    elif step == 2:
        errors["department"] = validate_department(record.department)
        errors["role"] = validate_role(record.role)
        errors["date_of_joining"] = validate_date_of_joining(record.date_of_joining)
    elif step == 3:
        if not record.employee_id:
            errors["employee_id"] = (
                "Employee ID is missing. Fill in department and date of joining first."
            )
        errors["password"] = validate_password(record.password, editing=editing)
        errors["confirm_password"] = validate_confirm_password(
            record.password, record.confirm_password
        )
    else:
        raise ValueError(f"Unknown wizard step: {step}")

    return {field: message for field, message in errors.items() if message}


def validate_all(record: OnboardingRecord, editing: bool = False) -> Dict[str, str]:
    """Validate every step at once (used before submission)."""
    errors: Dict[str, str] = {}
    for step in STEP_FIELDS:
        errors.update(validate_step(step, record, editing=editing))
    return errors
