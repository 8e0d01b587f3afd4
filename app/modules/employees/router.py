from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.modules.employees import schemas
from app.modules.employees.services import EmployeeService

router = APIRouter(prefix="/api/employees", tags=["employees"])


@router.get("", response_model=schemas.EmployeeListResponse)
async def list_employees(db: AsyncSession = Depends(get_db)):
    """
    Public staff directory.
    """
    employees = await EmployeeService.list_employees(db)
    return schemas.EmployeeListResponse(
        employees=[schemas.EmployeeResponse.model_validate(e) for e in employees]
    )
