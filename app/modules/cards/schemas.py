from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime, date


class CardResponse(BaseModel):
    """Card as stored, plus a display copy of the number masked to its last four digits"""
    id: int
    user_id: int
    card_number: Optional[str] = None
    masked_number: str  # e.g., "************1234"
    card_type: Optional[str] = None
    expiry: Optional[date] = None
    created_at: datetime


class CardListResponse(BaseModel):
    success: bool = True
    cards: List[CardResponse]
