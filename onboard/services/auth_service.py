"""
Service layer for sign-in and identity linking.

Three entry points resolve to one employee record:
password by email, password by employee ID, and an OAuth callback that
links a third-party identity by matching email.
"""
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from onboard.database.models import AuthUser, Employee
from onboard.errors import (
    AccountNotActivated,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationFailed,
)
from onboard.logger import get_logger
from onboard.services.employee_service import EmployeeService, normalize_email
from onboard.services.passwords import verify_password

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
NOT_ACTIVATED = "Account not activated. Please contact your administrator."


def employee_summary(employee: Employee) -> Dict[str, Any]:
    """Public view of an employee returned after sign-in."""
    return {
        "employee_id": employee.employee_id,
        "full_name": employee.full_name,
        "email": employee.email,
        "role": employee.role,
        "department": employee.department,
        "profile_image_url": employee.profile_image_url,
        "auth_user_id": employee.auth_user_id,
    }


class AuthService:
    """Service class for authentication."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.employees = EmployeeService(session)

    async def login(self, identifier: str, password: str) -> Employee:
        """Sign in with an email or an employee ID."""
        identifier = (identifier or "").strip()
        if not identifier or not password:
            raise ValidationFailed("Email/Employee ID and password are required")

        if "@" in identifier:
            return await self.login_with_email(identifier, password)
        return await self.login_with_employee_id(identifier, password)

    async def login_with_email(self, email: str, password: str) -> Employee:
        """Unknown email and wrong password fail the same way."""
        employee = await self.employees.get_by_email(email)
        auth_user = await self._linked_identity(employee)

        if employee is None or auth_user is None or not verify_password(
            password, auth_user.password_hash
        ):
            logger.info("Email login rejected")
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("Email login succeeded", employee_id=employee.employee_id)
        return employee

    async def login_with_employee_id(self, employee_id: str, password: str) -> Employee:
        """An employee without a linked identity gets a distinct error."""
        employee = await self.employees.get_employee(employee_id)
        if employee is None:
            logger.info("Employee ID login rejected: unknown ID")
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not employee.auth_user_id:
            logger.info("Employee ID login rejected: not activated", employee_id=employee_id)
            raise AccountNotActivated(NOT_ACTIVATED)

        auth_user = await self._linked_identity(employee)
        if auth_user is None or not verify_password(password, auth_user.password_hash):
            logger.info("Employee ID login rejected: bad password", employee_id=employee_id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("Employee ID login succeeded", employee_id=employee_id)
        return employee

    async def link_external_identity(
        self,
        email: str,
        auth_user_id: str,
        provider: str = "oauth",
    ) -> Employee:
        """
        Attach a third-party identity to the employee with the same email.

        A record already linked to a different identity is never relinked.
        """
        if not email or not auth_user_id:
            raise ValidationFailed("Email and auth user ID are required")

        employee = await self.employees.get_by_email(email)
        if employee is None:
            logger.info("OAuth link rejected: no employee", provider=provider)
            raise NotFoundError("No employee found with this email")

        if employee.auth_user_id and employee.auth_user_id != auth_user_id:
            logger.warning(
                "OAuth link rejected: already linked",
                employee_id=employee.employee_id,
                provider=provider,
            )
            raise ConflictError("Email already linked to another account")

        if employee.auth_user_id == auth_user_id:
            return employee

        owner = await self.session.scalar(
            select(Employee).where(Employee.auth_user_id == auth_user_id)
        )
        if owner is not None:
            logger.warning(
                "OAuth link rejected: identity owned by another employee",
                employee_id=employee.employee_id,
                provider=provider,
            )
            raise ConflictError("This account is already linked to another employee")

        auth_user = await self.session.get(AuthUser, auth_user_id)
        if auth_user is not None and (
            auth_user.provider == "password" or auth_user.email != employee.email
        ):
            logger.warning(
                "OAuth link rejected: identity does not match employee",
                employee_id=employee.employee_id,
                provider=provider,
            )
            raise ConflictError("This account is already linked to another employee")

        if auth_user is None:
            self.session.add(
                AuthUser(
                    id=auth_user_id,
                    email=normalize_email(email),
                    provider=provider,
                )
            )
            await self.session.flush()

        employee.auth_user_id = auth_user_id
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("OAuth link rejected: concurrent link", error=str(e.orig))
            raise ConflictError("This account is already linked to another employee") from e
        await self.session.refresh(employee)

        logger.info(
            "External identity linked",
            employee_id=employee.employee_id,
            provider=provider,
        )
        return employee

    async def validate_email(self, email: str) -> Optional[Employee]:
        """Existence check used before sending a sign-in link."""
        return await self.employees.get_by_email(email)

    async def _linked_identity(self, employee: Optional[Employee]) -> Optional[AuthUser]:
        if employee is None or not employee.auth_user_id:
            return None
        result = await self.session.execute(
            select(AuthUser).where(AuthUser.id == employee.auth_user_id)
        )
        return result.scalar_one_or_none()
