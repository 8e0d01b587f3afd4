from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from datetime import date
from decimal import Decimal
from typing import NamedTuple, Optional

from app.core.exceptions import DuplicateEmailError
from app.modules.users.models import User
from app.modules.users.schemas import ProjectedUser

PROJECTED_COLUMNS = (
    User.id,
    User.name,
    User.email,
    User.monthly_income,
    User.balance,
    User.address,
    User.nid_picture,
)


class FinancialSnapshot(NamedTuple):
    monthly_income: Optional[Decimal]
    balance: Decimal


class UserRepository:
    """Persistence adapter for user credentials and profiles.

    Methods flush but never commit; callers own the transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> Optional[User]:
        # Credentials must never come from a stale identity map entry
        result = await self.db.execute(
            select(User)
            .where(User.email == email)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: int) -> Optional[ProjectedUser]:
        result = await self.db.execute(
            select(*PROJECTED_COLUMNS).where(User.id == user_id)
        )
        row = result.mappings().first()
        if row is None:
            return None
        return ProjectedUser(**row)

    async def get_password_hash(self, user_id: int) -> Optional[str]:
        result = await self.db.execute(
            select(User.hashed_password).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        *,
        name: str,
        email: str,
        hashed_password: str,
        monthly_income: Optional[Decimal] = None,
        date_of_birth: Optional[date] = None,
        address: Optional[str] = None,
        nid_picture: Optional[str] = None,
        balance: Optional[Decimal] = None,
    ) -> int:
        """Insert a user and return its id; raises DuplicateEmailError"""
        if await self.find_by_email(email) is not None:
            raise DuplicateEmailError()

        user = User(
            name=name,
            email=email,
            hashed_password=hashed_password,
            monthly_income=monthly_income,
            date_of_birth=date_of_birth,
            address=address,
            nid_picture=nid_picture,
        )
        if balance is not None:
            user.balance = balance

        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            # A concurrent signup won the unique constraint
            await self.db.rollback()
            raise DuplicateEmailError() from exc
        return user.id

    async def update_password_hash(self, user_id: int, hashed_password: str) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(hashed_password=hashed_password)
        )

    async def get_financial_snapshot(
        self, user_id: int, for_update: bool = False
    ) -> Optional[FinancialSnapshot]:
        """Read income and balance straight from the store"""
        stmt = select(User.monthly_income, User.balance).where(User.id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        row = result.first()
        if row is None:
            return None
        return FinancialSnapshot(monthly_income=row.monthly_income, balance=row.balance)

    async def credit_balance(self, user_id: int, amount: Decimal) -> Decimal:
        """Atomically add ``amount`` to the stored balance and return the result"""
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(balance=User.balance + amount)
            .returning(User.balance)
        )
        return result.scalar_one()
