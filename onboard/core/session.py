"""
Per-user session context: onboarding wizard state and sign-in state.

A ``UserContext`` is created for each chat user (or test) and passed
explicitly to the wizard, the directory and the auth flow.
"""
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set

from onboard.core.id_generator import generate_employee_id
from onboard.core.record import OnboardingRecord
from onboard.logger import get_logger

logger = get_logger(__name__)

FIRST_STEP = 1
LAST_STEP = 3

# Fields that drive employee ID generation
ID_SOURCE_FIELDS = ("department", "date_of_joining")

# Fields that cannot change once a record is persisted
EDIT_LOCKED_FIELDS = ("employee_id", "department")


class ActionInFlight(Exception):
    """Raised when the same action is triggered again before it finished."""

    def __init__(self, action: str):
        super().__init__(f"{action} already in progress")
        self.action = action


class WizardSession:
    """State store for the onboarding wizard."""

    def __init__(self) -> None:
        self.current_step: int = FIRST_STEP
        self.is_editing_mode: bool = False
        self.record: OnboardingRecord = OnboardingRecord()
        self.id_locked: bool = False
        self._in_flight: Set[str] = set()

    def reset(self) -> None:
        """Start a fresh onboarding: step 1, empty record, create mode."""
        self.current_step = FIRST_STEP
        self.is_editing_mode = False
        self.record = OnboardingRecord()
        self.id_locked = False
        logger.debug("Wizard session reset")

    def load_for_edit(self, record: OnboardingRecord) -> None:
        """Replace the session wholesale with an existing record."""
        self.current_step = FIRST_STEP
        self.is_editing_mode = True
        self.record = record.copy()
        self.record.password = ""
        self.record.confirm_password = ""
        self.id_locked = True
        logger.debug("Wizard session loaded for edit", employee_id=record.employee_id)

    def update(self, **changes: Any) -> List[str]:
        """
        Write field changes into the record.

        Returns the names of fields that were refused because they are locked.
        A real change to department or joining date regenerates the draft ID.
        """
        refused: List[str] = []
        id_inputs_changed = False

        for name, value in changes.items():
            if name not in OnboardingRecord.field_names():
                raise AttributeError(f"Unknown record field: {name}")
            if self._is_locked(name):
                if getattr(self.record, name) != value:
                    refused.append(name)
                continue
            if name in ID_SOURCE_FIELDS and getattr(self.record, name) != value:
                id_inputs_changed = True
            setattr(self.record, name, value)

        if id_inputs_changed:
            self._on_id_inputs_changed()

        if refused:
            logger.info("Refused update of locked fields", fields=refused)
        return refused

    def lock_id(self) -> None:
        self.id_locked = True

    def unlock_id(self) -> None:
        """Release the lock taken for a submission that did not persist."""
        if not self.is_editing_mode:
            self.id_locked = False

    def is_busy(self, action: Optional[str] = None) -> bool:
        if action is None:
            return bool(self._in_flight)
        return action in self._in_flight

    @contextmanager
    def in_flight(self, action: str) -> Iterator[None]:
        """Mark an action as running; a second entry raises ``ActionInFlight``."""
        if action in self._in_flight:
            raise ActionInFlight(action)
        self._in_flight.add(action)
        try:
            yield
        finally:
            self._in_flight.discard(action)

    def _is_locked(self, name: str) -> bool:
        if name == "employee_id" and self.id_locked:
            return True
        return self.is_editing_mode and name in EDIT_LOCKED_FIELDS

    def _on_id_inputs_changed(self) -> None:
        """Regenerate the draft ID; never runs in edit mode or after locking."""
        if self.is_editing_mode or self.id_locked:
            return
        new_id = generate_employee_id(self.record.department, self.record.date_of_joining)
        self.record.employee_id = new_id or ""
        logger.debug("Draft employee ID regenerated", employee_id=self.record.employee_id)


@dataclass
class AuthSession:
    """Who is signed in for this user context."""

    employee: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.employee is not None

    @property
    def employee_id(self) -> Optional[str]:
        return self.employee.get("employee_id") if self.employee else None

    def login(self, employee: Dict[str, Any]) -> None:
        self.employee = dict(employee)

    def logout(self) -> None:
        self.employee = None


@dataclass
class UserContext:
    """Everything a single user's interaction needs."""

    wizard: WizardSession = field(default_factory=WizardSession)
    auth: AuthSession = field(default_factory=AuthSession)
