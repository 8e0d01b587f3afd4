from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional


class TakeLoanRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)


class TakeLoanResponse(BaseModel):
    success: bool = True
    message: str = "Loan approved"
    new_balance: Decimal = Field(..., alias="newBalance")

    class Config:
        populate_by_name = True


class LoanResponse(BaseModel):
    id: int
    user_id: int
    amount: Decimal
    status: str
    taken_at: datetime
    paid_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoanListResponse(BaseModel):
    success: bool = True
    loans: List[LoanResponse]
