"""
Employee ID generation.

An ID is the two-digit joining year, the department prefix and a random
four-digit suffix, e.g. ``24ENG4821`` for a 2024 Engineering hire.
"""
import random
from datetime import date
from typing import Optional, Union

from onboard.logger import get_logger
from onboard.utils.date_utils import parse_date

logger = get_logger(__name__)

DEPARTMENT_PREFIXES = {
    "Human Resources": "HR",
    "Engineering": "ENG",
    "Marketing": "MKT",
    "Sales": "SAL",
    "Finance": "FIN",
    "Operations": "OPS",
}
DEFAULT_PREFIX = "GEN"

DEPARTMENTS = tuple(DEPARTMENT_PREFIXES)

ROLE_SUGGESTIONS = (
    "Software Engineer",
    "Project Manager",
    "HR Specialist",
    "Marketing Coordinator",
    "Sales Representative",
    "Financial Analyst",
)

SUFFIX_MIN = 1000
SUFFIX_MAX = 9999


def department_prefix(department: str) -> str:
    """Short prefix for a department; unknown departments map to GEN."""
    return DEPARTMENT_PREFIXES.get(department, DEFAULT_PREFIX)


def id_stem(department: str, date_of_joining: Union[str, date]) -> Optional[str]:
    """The deterministic part of an ID (year + prefix), or None if inputs are unusable."""
    if not department or not date_of_joining:
        return None
    joined = parse_date(date_of_joining)
    if joined is None:
        return None
    return f"{joined:%y}{department_prefix(department)}"


def generate_employee_id(
    department: str,
    date_of_joining: Union[str, date],
    rng: Optional[random.Random] = None,
) -> Optional[str]:
    """
    Generate a new employee ID.

    Returns None when either input is missing. An unparseable date is a
    recoverable validation failure: it is logged and no ID is produced.
    """
    if not department or not date_of_joining:
        return None

    stem = id_stem(department, date_of_joining)
    if stem is None:
        logger.warning(
            "Invalid date of joining for employee ID generation",
            date_of_joining=str(date_of_joining),
        )
        return None

    suffix = (rng or random).randint(SUFFIX_MIN, SUFFIX_MAX)
    return f"{stem}{suffix}"


def is_consistent(
    employee_id: str,
    department: str,
    date_of_joining: Union[str, date],
) -> bool:
    """Check that an existing ID still matches its department and joining year."""
    stem = id_stem(department, date_of_joining)
    if not employee_id or stem is None:
        return False
    suffix = employee_id[len(stem):]
    return employee_id.startswith(stem) and suffix.isdigit() and len(suffix) == 4
