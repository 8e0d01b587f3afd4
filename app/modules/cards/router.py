from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.core.security import mask_card_number
from app.modules.users.schemas import ProjectedUser
from app.modules.cards import schemas, services

router = APIRouter(prefix="/api/cards", tags=["cards"])


@router.get("", response_model=schemas.CardListResponse)
async def list_cards(
    db: AsyncSession = Depends(get_db),
    current_user: ProjectedUser = Depends(get_current_user)
):
    """
    List the authenticated user's cards.

    - `masked_number` carries the number masked to its last four digits
    """
    cards = await services.CardService.get_user_cards(db, current_user.id)

    response = []
    for card in cards:
        response.append(schemas.CardResponse(
            id=card.id,
            user_id=card.user_id,
            card_number=card.card_number,
            masked_number=mask_card_number(card.card_number),
            card_type=card.card_type,
            expiry=card.expiry,
            created_at=card.created_at
        ))

    return schemas.CardListResponse(cards=response)
