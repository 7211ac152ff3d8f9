"""
Contract between client-side components and the backend collaborator.
"""
from typing import Any, Dict, List, Protocol

from onboard.core.record import OnboardingRecord


class EmployeeBackend(Protocol):
    """Persistence and auth operations the wizard, directory and login use.

    Implementations raise ``onboard.errors.OnboardError`` subclasses for
    expected failures; anything else is treated as a transport failure.
    """

    async def list_employees(self) -> List[OnboardingRecord]: ...

    async def get_employee(self, employee_id: str) -> OnboardingRecord: ...

    async def create_employee(self, payload: Dict[str, Any]) -> OnboardingRecord: ...

    async def update_employee(self, payload: Dict[str, Any]) -> OnboardingRecord: ...

    async def delete_employee(self, employee_id: str) -> None: ...

    async def login(self, identifier: str, password: str) -> Dict[str, Any]: ...
