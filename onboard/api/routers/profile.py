"""Profile lookup and avatar upload."""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from onboard.api.deps import get_db_session, require_api_key
from onboard.api.schemas import AvatarResponse, Employee
from onboard.errors import BadRequest
from onboard.services.avatar_storage import AvatarStorage
from onboard.services.employee_service import EmployeeService

router = APIRouter(dependencies=[Depends(require_api_key)])


def get_avatar_storage() -> AvatarStorage:
    return AvatarStorage()


@router.get("", response_model=Employee)
async def get_profile(
    employee_id: Optional[str] = Query(None, alias="id"),
    session: AsyncSession = Depends(get_db_session),
):
    if not employee_id:
        raise BadRequest("Employee ID is required")
    return await EmployeeService(session).get_employee_or_404(employee_id)


@router.post("/update-avatar", response_model=AvatarResponse)
async def update_avatar(
    file: Optional[UploadFile] = File(None),
    employee_id: Optional[str] = Form(None, alias="employeeId"),
    session: AsyncSession = Depends(get_db_session),
    storage: AvatarStorage = Depends(get_avatar_storage),
):
    if file is None or not employee_id:
        raise BadRequest("File and employeeId are required.")

    service = EmployeeService(session)
    # 404 before anything is written to disk
    await service.get_employee_or_404(employee_id)

    public_url = storage.save(employee_id, file.filename, await file.read())
    await service.set_profile_image(employee_id, public_url)
    return AvatarResponse(message="Avatar updated successfully.", public_url=public_url)
