"""
In-process backend used by the chat client.

Each call opens its own database session, runs one service operation and
returns plain ``OnboardingRecord`` objects so callers never hold ORM rows.
"""
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from onboard.core.record import OnboardingRecord
from onboard.database.session import get_session
from onboard.errors import BackendUnavailable
from onboard.logger import get_logger
from onboard.services.auth_service import AuthService, employee_summary
from onboard.services.employee_service import EmployeeService

logger = get_logger(__name__)


class DatabaseBackend:
    """``EmployeeBackend`` implementation over the local database."""

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self.session_factory = session_factory

    async def list_employees(self) -> List[OnboardingRecord]:
        try:
            async with get_session(self.session_factory) as session:
                employees = await EmployeeService(session).list_employees()
                return [OnboardingRecord.from_employee(e) for e in employees]
        except SQLAlchemyError as e:
            raise self._unavailable("list_employees", e) from e

    async def get_employee(self, employee_id: str) -> OnboardingRecord:
        try:
            async with get_session(self.session_factory) as session:
                employee = await EmployeeService(session).get_employee_or_404(employee_id)
                return OnboardingRecord.from_employee(employee)
        except SQLAlchemyError as e:
            raise self._unavailable("get_employee", e) from e

    async def create_employee(self, payload: Dict[str, Any]) -> OnboardingRecord:
        try:
            async with get_session(self.session_factory) as session:
                employee = await EmployeeService(session).create_employee(payload)
                return OnboardingRecord.from_employee(employee)
        except SQLAlchemyError as e:
            raise self._unavailable("create_employee", e) from e

    async def update_employee(self, payload: Dict[str, Any]) -> OnboardingRecord:
        try:
            async with get_session(self.session_factory) as session:
                employee = await EmployeeService(session).update_employee(payload)
                return OnboardingRecord.from_employee(employee)
        except SQLAlchemyError as e:
            raise self._unavailable("update_employee", e) from e

    async def delete_employee(self, employee_id: str) -> None:
        try:
            async with get_session(self.session_factory) as session:
                await EmployeeService(session).delete_employee(employee_id)
        except SQLAlchemyError as e:
            raise self._unavailable("delete_employee", e) from e

    async def login(self, identifier: str, password: str) -> Dict[str, Any]:
        try:
            async with get_session(self.session_factory) as session:
                employee = await AuthService(session).login(identifier, password)
                return employee_summary(employee)
        except SQLAlchemyError as e:
            raise self._unavailable("login", e) from e

    @staticmethod
    def _unavailable(operation: str, error: Exception) -> BackendUnavailable:
        logger.error("Database operation failed", operation=operation, error=str(error))
        return BackendUnavailable("The employee database is unavailable. Please try again later.")
