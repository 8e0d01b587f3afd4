from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.modules.users.schemas import ProjectedUser
from app.modules.loans.schemas import TakeLoanRequest, TakeLoanResponse, LoanResponse, LoanListResponse
from app.modules.loans.services import LoanService

router = APIRouter(prefix="/api/user", tags=["loans"])


@router.post("/take-loan", response_model=TakeLoanResponse, status_code=status.HTTP_201_CREATED)
async def take_loan(
    loan: TakeLoanRequest,
    db: AsyncSession = Depends(get_db),
    current_user: ProjectedUser = Depends(get_current_user)
):
    """
    Take a loan of up to three times the declared monthly income.

    - The ceiling is recomputed from stored income on every call
    - The amount is credited to the balance immediately
    """
    service = LoanService(db)
    new_balance = await service.take_loan(current_user.id, loan.amount)
    return TakeLoanResponse(new_balance=new_balance)


@router.get("/loans", response_model=LoanListResponse)
async def read_loans(
    db: AsyncSession = Depends(get_db),
    current_user: ProjectedUser = Depends(get_current_user)
):
    """
    Loan history of the authenticated user, newest first.
    """
    service = LoanService(db)
    loans = await service.get_user_loans(current_user.id)
    return LoanListResponse(loans=[LoanResponse.model_validate(loan) for loan in loans])
