"""
Client-side sign-in: calls the backend and records the result in the
user's ``AuthSession``.
"""
from onboard.core.backend import EmployeeBackend
from onboard.core.outcome import Outcome
from onboard.core.session import AuthSession
from onboard.errors import AuthenticationError, ErrorKind
from onboard.logger import get_logger

logger = get_logger(__name__)


async def sign_in(
    backend: EmployeeBackend,
    auth: AuthSession,
    identifier: str,
    password: str,
) -> Outcome:
    """Sign in by email or employee ID."""
    identifier = (identifier or "").strip()
    if not identifier or not password:
        return Outcome.failure(
            ErrorKind.VALIDATION,
            "Email/Employee ID and password are required.",
        )

    try:
        employee = await backend.login(identifier, password)
    except AuthenticationError as e:
        logger.info("Sign-in rejected", kind=e.kind.value)
        auth.logout()
        return Outcome.from_error(e)
    except Exception as e:
        logger.warning("Sign-in failed", error=str(e))
        auth.logout()
        return Outcome.from_error(e)

    auth.login(employee)
    logger.info("Signed in", employee_id=employee.get("employee_id"))
    return Outcome.success(
        f"Welcome, {employee.get('full_name') or employee.get('email')}!",
        data=employee,
    )


def sign_out(auth: AuthSession) -> Outcome:
    was_signed_in = auth.is_authenticated
    auth.logout()
    if not was_signed_in:
        return Outcome.success("You were not signed in.")
    return Outcome.success("Logout successful.")
