from sqlalchemy import Column, Integer, String, DateTime, Date, Text, Numeric
from sqlalchemy.sql import func
from datetime import datetime, timezone
from app.core.database import Base
from app.core.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Account holder with credentials and financial profile"""
    __tablename__ = "users"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True)

    # Authentication
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Personal Information
    name = Column(String(255), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    address = Column(Text, nullable=True)
    nid_picture = Column(Text, nullable=True)  # Reference returned by the upload step

    # Financial Profile
    monthly_income = Column(Numeric(15, 2), nullable=True)
    balance = Column(
        Numeric(15, 2),
        default=settings.STARTING_BALANCE,
        server_default=str(settings.STARTING_BALANCE),
        nullable=False
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
