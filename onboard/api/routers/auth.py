"""Sign-in, identity linking and email pre-checks."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from onboard.api.deps import get_db_session
from onboard.api.schemas import (
    EmailCheck,
    Employee,
    EmployeeSummary,
    LinkEmployeeRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
)
from onboard.errors import BadRequest
from onboard.services.auth_service import AuthService, employee_summary

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, session: AsyncSession = Depends(get_db_session)):
    employee = await AuthService(session).login(body.identifier, body.password)
    return LoginResponse(employee=EmployeeSummary(**employee_summary(employee)))


@router.post("/logout", response_model=MessageResponse)
async def logout():
    # Sessions live in the client; nothing to invalidate server side
    return MessageResponse(message="Logout successful")


@router.post("/link-employee", response_model=Employee)
async def link_employee(
    body: LinkEmployeeRequest,
    session: AsyncSession = Depends(get_db_session),
):
    return await AuthService(session).link_external_identity(
        body.email,
        body.auth_user_id,
        provider=body.provider or "oauth",
    )


@router.get("/validate-email", response_model=EmailCheck, response_model_exclude_none=True)
async def validate_email(
    email: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_db_session),
):
    if not email:
        raise BadRequest("Email is required")

    employee = await AuthService(session).validate_email(email)
    if employee is None:
        return EmailCheck(is_valid=False, error="No employee found with this email address")
    return EmailCheck(
        is_valid=True,
        employee={
            "email": employee.email,
            "employeeId": employee.employee_id,
            "fullName": employee.full_name,
        },
    )
