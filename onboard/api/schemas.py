"""Pydantic schemas for the HTTP API; JSON field names are camelCase."""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmployeeBase(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    department: Optional[str] = None
    role: Optional[str] = None
    date_of_joining: Optional[str] = None  # ISO 8601: "2024-03-01"
    profile_image_url: Optional[str] = None


class EmployeeCreate(EmployeeBase):
    """Required fields are checked by the service so errors come back per field."""

    employee_id: Optional[str] = None
    password: Optional[str] = None


class EmployeeUpdate(EmployeeBase):
    employee_id: str = Field(..., min_length=1)
    password: Optional[str] = None
    version: Optional[int] = None


class Employee(CamelModel):
    employee_id: str
    full_name: str
    email: str
    phone_number: str
    department: str
    role: str
    date_of_joining: str
    profile_image_url: Optional[str] = None
    auth_user_id: Optional[str] = None
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class EmployeeSummary(CamelModel):
    employee_id: str
    full_name: str
    email: str
    role: Optional[str] = None
    department: Optional[str] = None
    profile_image_url: Optional[str] = None
    auth_user_id: Optional[str] = None


class LoginRequest(CamelModel):
    identifier: str = ""
    password: str = ""


class LoginResponse(CamelModel):
    success: bool = True
    employee: EmployeeSummary


class LinkEmployeeRequest(CamelModel):
    email: str = ""
    auth_user_id: str = ""
    provider: str = "oauth"


class EmailCheck(CamelModel):
    is_valid: bool
    employee: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class MessageResponse(CamelModel):
    message: str


class RestoreResponse(MessageResponse):
    count: int


class AvatarResponse(MessageResponse):
    public_url: str

