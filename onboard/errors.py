"""
Error taxonomy shared by services, the HTTP API and the chat client.
"""
from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    """Category of a failed operation, used to pick the user-facing message."""
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    AUTHENTICATION = "authentication"
    NOT_ACTIVATED = "not_activated"
    CONFIRMATION_REQUIRED = "confirmation_required"
    BUSY = "busy"
    TRANSPORT = "transport"


class OnboardError(Exception):
    """Base class for all expected failures."""

    kind: ErrorKind = ErrorKind.TRANSPORT
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(OnboardError):
    """One or more fields are missing or malformed."""

    kind = ErrorKind.VALIDATION
    status_code = 422

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.fields = fields or {}


class ConflictError(OnboardError):
    """Duplicate email, stale version or identity already linked elsewhere."""

    kind = ErrorKind.CONFLICT
    status_code = 409


class NotFoundError(OnboardError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class AuthenticationError(OnboardError):
    kind = ErrorKind.AUTHENTICATION
    status_code = 401


class AccountNotActivated(AuthenticationError):
    """Employee record exists but has no linked identity."""

    kind = ErrorKind.NOT_ACTIVATED


class BackendUnavailable(OnboardError):
    """The database or another collaborator failed unexpectedly."""

    kind = ErrorKind.TRANSPORT
    status_code = 503


class BadRequest(OnboardError):
    """Request is missing a required parameter."""

    kind = ErrorKind.VALIDATION
    status_code = 400
