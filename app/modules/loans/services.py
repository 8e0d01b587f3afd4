from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from decimal import Decimal, InvalidOperation
from typing import List, Optional
import asyncio
import logging
import weakref

from app.core.config import settings
from app.core.exceptions import (
    AppException,
    EligibilityExceededError,
    InvalidInputError,
    StoreFailureError,
    UnauthenticatedError,
)
from app.modules.loans.models import Loan, LoanStatus
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

# One lock per user with a loan in flight; entries vanish once no caller holds them
_user_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(user_id: int) -> asyncio.Lock:
    lock = _user_locks.get(user_id)
    if lock is None:
        lock = asyncio.Lock()
        _user_locks[user_id] = lock
    return lock


class LoanService:
    """Income-based loan eligibility and the loan ledger"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)

    @staticmethod
    def calculate_ceiling(monthly_income: Optional[Decimal]) -> Decimal:
        """Maximum loan for a declared monthly income; no income means 0"""
        income = monthly_income if monthly_income is not None else Decimal("0")
        return Decimal(income) * settings.LOAN_INCOME_MULTIPLIER

    @staticmethod
    def _coerce_amount(amount) -> Decimal:
        if amount is None or isinstance(amount, bool):
            raise InvalidInputError("Missing amount")
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError):
            raise InvalidInputError("Amount must be a number")
        if not value.is_finite() or value <= 0:
            raise InvalidInputError("Amount must be greater than zero")
        return value

    async def take_loan(self, user_id: int, amount) -> Decimal:
        """
        Issue a loan and credit it to the user's balance.

        Eligibility is evaluated against income and balance read inside the
        same transaction that records the loan. Calls for the same user are
        serialized; the balance is credited with a single atomic increment.
        Returns the new balance.
        """
        amount = self._coerce_amount(amount)

        lock = _lock_for(user_id)
        async with lock:
            try:
                snapshot = await self.users.get_financial_snapshot(user_id, for_update=True)
                if snapshot is None:
                    raise UnauthenticatedError(reason="user_not_found")

                ceiling = self.calculate_ceiling(snapshot.monthly_income)
                if amount > ceiling:
                    raise EligibilityExceededError(ceiling)

                self.db.add(Loan(user_id=user_id, amount=amount, status=LoanStatus.ACTIVE.value))
                new_balance = await self.users.credit_balance(user_id, amount)
                await self.db.commit()
            except AppException:
                await self.db.rollback()
                raise
            except SQLAlchemyError as exc:
                await self.db.rollback()
                logger.error(f"Loan issuance failed for user {user_id}", exc_info=exc)
                raise StoreFailureError() from exc

        logger.info(f"Loan of {amount} issued to user {user_id}, new balance {new_balance}")
        return new_balance

    async def get_user_loans(self, user_id: int) -> List[Loan]:
        """Loan history, newest first"""
        result = await self.db.execute(
            select(Loan)
            .where(Loan.user_id == user_id)
            .order_by(Loan.taken_at.desc(), Loan.id.desc())
        )
        return list(result.scalars().all())
