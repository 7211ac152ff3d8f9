"""
Three-step onboarding wizard: basic info -> job details -> account setup.

The wizard owns transitions only; all data lives in the injected
``WizardSession`` and all persistence goes through the backend.
"""
from typing import Any, Optional

from onboard.core.backend import EmployeeBackend
from onboard.core.outcome import Outcome
from onboard.core.record import OnboardingRecord
from onboard.core.session import FIRST_STEP, LAST_STEP, ActionInFlight, WizardSession
from onboard.core.validators import validate_all, validate_step
from onboard.errors import ErrorKind
from onboard.logger import get_logger

logger = get_logger(__name__)

STEP_TITLES = {
    1: "Basic Info",
    2: "Job Details",
    3: "Account Setup",
}


class OnboardingWizard:
    """State machine over a ``WizardSession``."""

    def __init__(self, session: WizardSession, backend: EmployeeBackend):
        self.session = session
        self.backend = backend

    @property
    def current_step(self) -> int:
        return self.session.current_step

    @property
    def record(self) -> OnboardingRecord:
        return self.session.record

    def start_new(self) -> None:
        self.session.reset()

    def edit(self, record: OnboardingRecord) -> None:
        """Side transition into edit mode with every step pre-filled."""
        self.session.load_for_edit(record)

    def update(self, **changes: Any) -> Outcome:
        """Write step input into the session; locked fields are reported back."""
        refused = self.session.update(**changes)
        if refused:
            return Outcome.failure(
                ErrorKind.VALIDATION,
                "These fields cannot be changed for an existing employee.",
                {name: "Locked in edit mode." for name in refused},
            )
        return Outcome.success()

    def step_errors(self, step: Optional[int] = None) -> dict:
        return validate_step(
            step or self.current_step,
            self.session.record,
            editing=self.session.is_editing_mode,
        )

    def is_step_valid(self, step: Optional[int] = None) -> bool:
        return not self.step_errors(step)

    def next(self) -> Outcome:
        """Advance one step if the current step is valid."""
        step = self.current_step
        errors = self.step_errors(step)
        if errors:
            logger.info("Wizard step rejected", step=step, fields=sorted(errors))
            return Outcome.failure(
                ErrorKind.VALIDATION,
                f"Please complete Step {step} to proceed.",
                errors,
            )
        if step >= LAST_STEP:
            return Outcome.failure(
                ErrorKind.VALIDATION,
                "This is the last step. Submit to finish onboarding.",
            )
        self.session.current_step = step + 1
        return Outcome.success()

    def back(self) -> Outcome:
        """Go back one step; entered data is kept."""
        if self.current_step <= FIRST_STEP:
            return Outcome.failure(ErrorKind.VALIDATION, "Already at the first step.")
        self.session.current_step -= 1
        return Outcome.success()

    async def submit(self) -> Outcome:
        """
        Send the accumulated record to the backend.

        Create or update depends on edit mode. On success the session is reset
        and the saved record is returned in ``data``; on failure the wizard
        stays on the last step.
        """
        session = self.session
        if session.current_step != LAST_STEP:
            return Outcome.failure(
                ErrorKind.VALIDATION,
                f"Please complete Step {session.current_step} to proceed.",
            )

        errors = validate_all(session.record, editing=session.is_editing_mode)
        if errors:
            return Outcome.failure(
                ErrorKind.VALIDATION,
                "Please fix the highlighted fields before submitting.",
                errors,
            )

        try:
            with session.in_flight("submit"):
                return await self._send()
        except ActionInFlight:
            return Outcome.failure(ErrorKind.BUSY, "Submission already in progress.")

    async def _send(self) -> Outcome:
        session = self.session
        editing = session.is_editing_mode
        session.lock_id()
        payload = session.record.to_payload()

        try:
            if editing:
                saved = await self.backend.update_employee(payload)
            else:
                saved = await self.backend.create_employee(payload)
        except Exception as e:
            session.unlock_id()
            logger.warning(
                "Onboarding submission failed",
                employee_id=payload.get("employee_id"),
                editing=editing,
                error=str(e),
            )
            return Outcome.from_error(e)

        logger.info(
            "Onboarding submitted",
            employee_id=saved.employee_id,
            editing=editing,
        )
        session.reset()
        message = (
            "Employee details updated."
            if editing
            else "Employee Onboarding Complete!"
        )
        return Outcome.success(message, data=saved)
