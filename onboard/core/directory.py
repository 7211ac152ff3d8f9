"""
Employee directory: list, edit, delete and start new onboardings.
"""
from typing import List, Optional

from onboard.core.backend import EmployeeBackend
from onboard.core.outcome import Outcome
from onboard.core.record import OnboardingRecord
from onboard.core.session import ActionInFlight, WizardSession
from onboard.errors import ErrorKind, NotFoundError
from onboard.logger import get_logger

logger = get_logger(__name__)


class EmployeeDirectory:
    """Directory view over the backend; shares the wizard session for edits."""

    def __init__(self, backend: EmployeeBackend, session: WizardSession):
        self.backend = backend
        self.session = session
        self.employees: List[OnboardingRecord] = []
        self.error: Optional[str] = None

    async def list(self) -> Outcome:
        """Fetch all records. An empty directory is a normal result."""
        try:
            employees = await self.backend.list_employees()
        except Exception as e:
            logger.warning("Failed to fetch employees", error=str(e))
            outcome = Outcome.from_error(e)
            self.employees = []
            self.error = outcome.message
            return outcome

        self.employees = list(employees)
        self.error = None
        return Outcome.success(data=self.employees)

    async def delete(self, employee_id: str, confirmed: bool = False) -> Outcome:
        """
        Delete one record after explicit confirmation.

        Without ``confirmed`` nothing is sent and a confirmation request is
        returned. On success the list is refetched.
        """
        if not confirmed:
            return Outcome.failure(
                ErrorKind.CONFIRMATION_REQUIRED,
                f"Are you sure you want to delete employee with ID: {employee_id}?",
            )

        try:
            with self.session.in_flight(f"delete:{employee_id}"):
                await self.backend.delete_employee(employee_id)
        except ActionInFlight:
            return Outcome.failure(ErrorKind.BUSY, "Deletion already in progress.")
        except NotFoundError:
            logger.info("Delete target not found", employee_id=employee_id)
            return Outcome.failure(
                ErrorKind.NOT_FOUND,
                f"Employee {employee_id} was not found. Refresh the list.",
            )
        except Exception as e:
            logger.warning("Failed to delete employee", employee_id=employee_id, error=str(e))
            return Outcome.from_error(e)

        logger.info("Employee deleted", employee_id=employee_id)
        refreshed = await self.list()
        if not refreshed.ok:
            return refreshed
        return Outcome.success("Employee deleted successfully!", data=self.employees)

    def find(self, employee_id: str) -> Optional[OnboardingRecord]:
        for employee in self.employees:
            if employee.employee_id == employee_id:
                return employee
        return None

    def edit(self, record: OnboardingRecord) -> None:
        """Load a record into the wizard session in edit mode."""
        self.session.load_for_edit(record)

    def create(self) -> None:
        """Prepare the wizard session for a fresh onboarding."""
        self.session.reset()
