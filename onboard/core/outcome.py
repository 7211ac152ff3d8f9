"""
Result object returned by client-side operations instead of raising.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from onboard.errors import ErrorKind, OnboardError

GENERIC_FAILURE = "Something went wrong. Please try again."


@dataclass
class Outcome:
    ok: bool
    message: str = ""
    kind: Optional[ErrorKind] = None
    data: Any = None
    field_errors: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def success(cls, message: str = "", data: Any = None) -> "Outcome":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        field_errors: Optional[Dict[str, str]] = None,
    ) -> "Outcome":
        return cls(ok=False, message=message, kind=kind, field_errors=field_errors or {})

    @classmethod
    def from_error(cls, error: Exception) -> "Outcome":
        """Convert any exception raised by a backend call into a failed outcome."""
        if isinstance(error, OnboardError):
            return cls.failure(error.kind, error.message, getattr(error, "fields", None))
        return cls.failure(ErrorKind.TRANSPORT, GENERIC_FAILURE)
