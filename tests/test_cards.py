"""
Tests for the card listing
"""
import pytest
from datetime import date

from app.modules.cards.models import Card
from app.modules.cards.services import CardService
from conftest import bearer, create_user


async def add_card(db_session, user_id: int, number: str, card_type: str = "visa") -> Card:
    card = Card(user_id=user_id, card_number=number, card_type=card_type, expiry=date(2030, 12, 31))
    db_session.add(card)
    await db_session.commit()
    return card


class TestCardService:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_only_own_cards(self, db_session, test_user):
        other = await create_user(db_session, email="bob@efportal.com")
        await add_card(db_session, test_user, "4111111111111111")
        await add_card(db_session, other, "5500000000000004", "mastercard")

        cards = await CardService.get_user_cards(db_session, test_user)

        assert [card.user_id for card in cards] == [test_user]


class TestCardEndpoints:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_list_cards_raw_and_masked(self, client, db_session, test_user, auth_headers):
        await add_card(db_session, test_user, "4111111111111111")

        response = await client.get("/api/cards", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert len(data["cards"]) == 1
        assert data["cards"][0]["card_number"] == "4111111111111111"
        assert data["cards"][0]["masked_number"] == "************1111"
        assert data["cards"][0]["card_type"] == "visa"
        assert data["cards"][0]["expiry"] == "2030-12-31"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_list_cards_never_cross_user(self, client, db_session, test_user):
        other = await create_user(db_session, email="bob@efportal.com")
        await add_card(db_session, test_user, "4111111111111111")

        response = await client.get("/api/cards", headers=bearer(other))

        assert response.status_code == 200
        assert response.json()["cards"] == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cards_require_auth(self, client):
        response = await client.get("/api/cards")

        assert response.status_code == 401
