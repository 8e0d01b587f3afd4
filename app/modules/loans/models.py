from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime
from sqlalchemy.sql import func
from app.core.database import Base
from app.modules.users.models import utcnow
import enum


class LoanStatus(str, enum.Enum):
    """Loan status; only ACTIVE is produced, the others are reserved"""
    ACTIVE = "active"
    PAID = "paid"
    DEFAULTED = "defaulted"


class Loan(Base):
    """One loan issuance event"""
    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    status = Column(String(50), default=LoanStatus.ACTIVE.value, nullable=False)
    taken_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Loan(id={self.id}, user_id={self.user_id}, amount={self.amount}, status={self.status})>"
