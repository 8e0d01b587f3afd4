from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date
from sqlalchemy.sql import func
from app.core.database import Base
from app.modules.users.models import utcnow


class Card(Base):
    """Payment card issued to a user; read-only in this service"""
    __tablename__ = "cards"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    card_number = Column(String(40), nullable=True)
    card_type = Column(String(50), nullable=True)
    expiry = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Card(id={self.id}, user_id={self.user_id}, type={self.card_type})>"
