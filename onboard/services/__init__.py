"""
Backend services: persistence, authentication and file storage.
"""
from onboard.services.auth_service import AuthService
from onboard.services.avatar_storage import AvatarStorage
from onboard.services.backend import DatabaseBackend
from onboard.services.employee_service import EmployeeService

__all__ = ["AuthService", "AvatarStorage", "DatabaseBackend", "EmployeeService"]
