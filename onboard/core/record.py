"""
Canonical in-memory shape of an employee record being onboarded or edited.
"""
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Optional

CREDENTIAL_FIELDS = ("password", "confirm_password")


@dataclass
class OnboardingRecord:
    # Step 1: basic information
    full_name: str = ""
    email: str = ""
    phone_number: str = ""

    # Step 2: job details
    department: str = ""
    role: str = ""
    date_of_joining: str = ""

    # Step 3: account setup
    employee_id: str = ""
    password: str = ""
    confirm_password: str = ""

    profile_image_url: Optional[str] = None
    version: Optional[int] = None

    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "OnboardingRecord":
        """Build a record from a dict, ignoring unknown keys and None values."""
        known = set(cls.field_names())
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})

    @classmethod
    def from_employee(cls, employee: Any) -> "OnboardingRecord":
        """Load a persisted employee (ORM row or API model) for editing."""
        return cls(
            employee_id=employee.employee_id,
            full_name=employee.full_name,
            email=employee.email,
            phone_number=employee.phone_number,
            department=employee.department,
            role=employee.role,
            date_of_joining=employee.date_of_joining,
            profile_image_url=employee.profile_image_url,
            version=employee.version,
        )

    def copy(self) -> "OnboardingRecord":
        return replace(self)

    def to_payload(self) -> Dict[str, Any]:
        """Fields sent to the backend; the confirmation never leaves the client."""
        data = asdict(self)
        data.pop("confirm_password")
        if not data["password"]:
            data.pop("password")
        return data
