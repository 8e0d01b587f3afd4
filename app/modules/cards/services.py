from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from app.modules.cards.models import Card


class CardService:
    """Read access to a user's cards"""

    @staticmethod
    async def get_user_cards(db: AsyncSession, user_id: int) -> List[Card]:
        """Cards owned by ``user_id`` only"""
        result = await db.execute(
            select(Card)
            .where(Card.user_id == user_id)
            .order_by(Card.id)
        )
        return list(result.scalars().all())
