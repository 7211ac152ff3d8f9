"""Employee CRUD endpoints."""
import json
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from onboard.api.deps import get_db_session, require_api_key
from onboard.api.schemas import (
    Employee,
    EmployeeCreate,
    EmployeeUpdate,
    MessageResponse,
    RestoreResponse,
)
from onboard.config import settings
from onboard.errors import BadRequest, NotFoundError, ValidationFailed
from onboard.logger import get_logger
from onboard.services.employee_service import EmployeeService

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("", response_model=List[Employee])
async def list_employees(session: AsyncSession = Depends(get_db_session)):
    return await EmployeeService(session).list_employees()


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(
    body: EmployeeCreate,
    session: AsyncSession = Depends(get_db_session),
):
    return await EmployeeService(session).create_employee(body.model_dump(exclude_none=True))


@router.put("", response_model=Employee)
async def update_employee(
    body: EmployeeUpdate,
    session: AsyncSession = Depends(get_db_session),
):
    return await EmployeeService(session).update_employee(body.model_dump(exclude_none=True))


@router.delete("", response_model=MessageResponse)
async def delete_employee(
    employee_id: Optional[str] = Query(None, alias="id"),
    session: AsyncSession = Depends(get_db_session),
):
    if not employee_id:
        raise BadRequest("Employee ID is required")
    await EmployeeService(session).delete_employee(employee_id)
    return MessageResponse(message="Employee deleted successfully")


@router.post("/restore", response_model=RestoreResponse)
async def restore_employees(session: AsyncSession = Depends(get_db_session)):
    """Replace all employees with the records in SEED_FILE."""
    seed_file = settings.SEED_FILE
    if not seed_file.exists():
        raise NotFoundError("Seed file not found")

    try:
        records = json.loads(seed_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.error("Seed file is not valid JSON", path=str(seed_file), error=str(e))
        raise ValidationFailed("Seed file is not valid JSON") from e
    if not isinstance(records, list):
        raise ValidationFailed("Seed file must contain a list of employees")

    count = await EmployeeService(session).restore(records)
    return RestoreResponse(message="Employees restored successfully", count=count)
