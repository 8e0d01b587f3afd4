from pydantic import BaseModel
from typing import List, Optional


class EmployeeResponse(BaseModel):
    id: int
    name: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True


class EmployeeListResponse(BaseModel):
    success: bool = True
    employees: List[EmployeeResponse]
