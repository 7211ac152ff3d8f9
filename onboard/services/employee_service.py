"""
Service layer for Employee operations.
"""
import uuid
from typing import Any, Dict, List, Optional
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.ext.asyncio import AsyncSession

from onboard.core.id_generator import generate_employee_id, is_consistent
from onboard.core.validators import (
    validate_date_of_joining,
    validate_email,
    validate_full_name,
    validate_password,
    validate_role,
)
from onboard.database.models import AuthUser, Employee
from onboard.errors import ConflictError, NotFoundError, ValidationFailed
from onboard.logger import get_logger
from onboard.services.passwords import hash_password
from onboard.utils.date_utils import to_iso

logger = get_logger(__name__)

REQUIRED_FIELDS = (
    "full_name",
    "email",
    "phone_number",
    "department",
    "role",
    "date_of_joining",
)

UPDATABLE_FIELDS = (
    "full_name",
    "email",
    "phone_number",
    "role",
    "date_of_joining",
    "profile_image_url",
)

# Attempts to find a free employee ID before giving up
MAX_ID_ATTEMPTS = 20


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _check_fields(data: Dict[str, Any], partial: bool = False) -> None:
    """Server-side shape checks; raises ValidationFailed with per-field messages."""
    errors: Dict[str, str] = {}

    if not partial:
        for name in REQUIRED_FIELDS:
            if not str(data.get(name) or "").strip():
                errors[name] = "This field is required."

    checks = {
        "full_name": validate_full_name,
        "email": validate_email,
        "role": validate_role,
        "date_of_joining": validate_date_of_joining,
    }
    for name, check in checks.items():
        if name in errors or name not in data:
            continue
        message = check(data[name])
        if message:
            errors[name] = message

    if data.get("password"):
        message = validate_password(data["password"])
        if message:
            errors["password"] = message

    if errors:
        raise ValidationFailed("Missing or invalid employee data", errors)


class EmployeeService:
    """Service class for Employee operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_employees(self) -> List[Employee]:
        """Get all employees, oldest first."""
        result = await self.session.execute(
            select(Employee).order_by(Employee.created_at.asc(), Employee.employee_id.asc())
        )
        return list(result.scalars().all())

    async def get_employee(self, employee_id: str) -> Optional[Employee]:
        """Get an employee by ID."""
        result = await self.session.execute(
            select(Employee).where(Employee.employee_id == employee_id)
        )
        return result.scalar_one_or_none()

    async def get_employee_or_404(self, employee_id: str) -> Employee:
        employee = await self.get_employee(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    async def get_by_email(self, email: str) -> Optional[Employee]:
        result = await self.session.execute(
            select(Employee).where(Employee.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def create_employee(self, data: Dict[str, Any]) -> Employee:
        """Create a new employee record, activating it when a password is given."""
        _check_fields(data)

        email = normalize_email(data["email"])
        if await self.get_by_email(email):
            raise ConflictError("An employee with this email already exists")

        employee_id = await self._unique_employee_id(
            data.get("employee_id"),
            data["department"],
            data["date_of_joining"],
        )

        employee = Employee(
            employee_id=employee_id,
            full_name=data["full_name"].strip(),
            email=email,
            phone_number=data["phone_number"].strip(),
            department=data["department"],
            role=data["role"].strip(),
            date_of_joining=to_iso(data["date_of_joining"]),
            profile_image_url=data.get("profile_image_url"),
        )
        if data.get("password"):
            await self._set_password(employee, data["password"])
        self.session.add(employee)

        await self._commit()
        await self.session.refresh(employee)

        logger.info(
            "Employee created",
            employee_id=employee.employee_id,
            department=employee.department,
            activated=employee.auth_user_id is not None,
        )

        return employee

    async def update_employee(self, data: Dict[str, Any]) -> Employee:
        """
        Update an employee keyed by ``employee_id``.

        Department is fixed once an ID is assigned. When ``version`` is
        supplied it must match the stored row.
        """
        employee_id = data.get("employee_id")
        if not employee_id:
            raise ValidationFailed(
                "Employee ID is required for update",
                {"employee_id": "This field is required."},
            )

        employee = await self.get_employee_or_404(employee_id)

        expected_version = data.get("version")
        if expected_version is not None and expected_version != employee.version:
            raise ConflictError(
                "Employee was modified by someone else. Reload and try again."
            )

        department = data.get("department")
        if department and department != employee.department:
            raise ValidationFailed(
                "Department cannot be changed for an existing employee",
                {"department": "Locked once an employee ID is assigned."},
            )

        changes = {
            name: data[name]
            for name in UPDATABLE_FIELDS
            if name in data and data[name] is not None
        }
        _check_fields({**changes, "password": data.get("password")}, partial=True)

        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
            other = await self.get_by_email(changes["email"])
            if other and other.employee_id != employee.employee_id:
                raise ConflictError("An employee with this email already exists")
        if "date_of_joining" in changes:
            changes["date_of_joining"] = to_iso(changes["date_of_joining"])

        for name, value in changes.items():
            setattr(employee, name, value)

        if "email" in changes and employee.auth_user_id:
            auth_user = await self.session.get(AuthUser, employee.auth_user_id)
            if auth_user is not None and auth_user.provider == "password":
                auth_user.email = changes["email"]

        if data.get("password"):
            await self._set_password(employee, data["password"])

        await self._commit()
        await self.session.refresh(employee)

        logger.info(
            "Employee updated",
            employee_id=employee.employee_id,
            fields=sorted(changes),
            password_changed=bool(data.get("password")),
        )

        return employee

    async def delete_employee(self, employee_id: str) -> None:
        """Delete an employee; NotFoundError when absent."""
        employee = await self.get_employee_or_404(employee_id)
        await self.session.delete(employee)
        await self._commit()
        logger.info("Employee deleted", employee_id=employee_id)

    async def set_profile_image(self, employee_id: str, url: str) -> Employee:
        employee = await self.get_employee_or_404(employee_id)
        employee.profile_image_url = url
        await self._commit()
        await self.session.refresh(employee)
        logger.info("Profile image updated", employee_id=employee_id)
        return employee

    async def restore(self, records: List[Dict[str, Any]]) -> int:
        """Replace every employee with the given records."""
        await self.session.execute(delete(Employee))
        await self.session.flush()

        for data in records:
            data = dict(data)
            data.pop("password", None)
            _check_fields(data)
            employee = Employee(
                employee_id=await self._unique_employee_id(
                    data.get("employee_id"), data["department"], data["date_of_joining"]
                ),
                full_name=data["full_name"].strip(),
                email=normalize_email(data["email"]),
                phone_number=data["phone_number"].strip(),
                department=data["department"],
                role=data["role"].strip(),
                date_of_joining=to_iso(data["date_of_joining"]),
                profile_image_url=data.get("profile_image_url"),
            )
            self.session.add(employee)
            await self._flush()

        await self._commit()
        logger.info("Employees restored", count=len(records))
        return len(records)

    async def _unique_employee_id(
        self,
        requested: Optional[str],
        department: str,
        date_of_joining: str,
    ) -> str:
        """Keep the requested ID if it is free and matches the inputs, otherwise generate one."""
        if (
            requested
            and is_consistent(requested, department, date_of_joining)
            and not await self.get_employee(requested)
        ):
            return requested

        for _ in range(MAX_ID_ATTEMPTS):
            candidate = generate_employee_id(department, date_of_joining)
            if candidate is None:
                break
            if not await self.get_employee(candidate):
                if requested:
                    logger.info(
                        "Requested employee ID unusable, generated a new one",
                        requested=requested,
                        employee_id=candidate,
                    )
                return candidate

        raise ConflictError("Could not assign a unique employee ID")

    async def _set_password(self, employee: Employee, password: str) -> None:
        """Hash the password onto the linked identity, creating one if needed."""
        auth_user = None
        if employee.auth_user_id:
            auth_user = await self.session.get(AuthUser, employee.auth_user_id)

        if auth_user is None:
            auth_user = AuthUser(
                id=str(uuid.uuid4()),
                email=employee.email,
                provider="password",
            )
            self.session.add(auth_user)
            await self.session.flush()
            employee.auth_user_id = auth_user.id

        auth_user.password_hash = hash_password(password)

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("Integrity error", error=str(e.orig))
            raise ConflictError("Employee ID or email already exists") from e

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("Integrity error", error=str(e.orig))
            raise ConflictError("Employee ID or email already exists") from e
        except StaleDataError as e:
            await self.session.rollback()
            logger.warning("Stale employee row", error=str(e))
            raise ConflictError(
                "Employee was modified by someone else. Reload and try again."
            ) from e
