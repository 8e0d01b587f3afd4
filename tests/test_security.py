"""
Unit tests for password hashing and session tokens
"""
import pytest
from datetime import datetime, timedelta, timezone

from jose import jwt

from app.core.exceptions import InvalidTokenError
from app.core.security import (
    TokenService,
    get_password_hash,
    verify_password,
    mask_card_number,
)


class TestPasswordHashing:
    """Tests for bcrypt hashing"""

    @pytest.mark.unit
    def test_hash_round_trip(self):
        hashed = get_password_hash("correct horse battery staple")

        assert hashed != "correct horse battery staple"
        assert verify_password("correct horse battery staple", hashed) is True

    @pytest.mark.unit
    def test_wrong_password_rejected(self):
        hashed = get_password_hash("s3cret")

        assert verify_password("s3cret!", hashed) is False
        assert verify_password("", hashed) is False

    @pytest.mark.unit
    def test_hashes_are_salted(self):
        assert get_password_hash("same") != get_password_hash("same")

    @pytest.mark.unit
    def test_verify_against_garbage_hash(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False
        assert verify_password("anything", "") is False


class TestTokenService:
    """Tests for token issue and validation"""

    @pytest.mark.unit
    def test_issue_and_validate(self):
        service = TokenService("secret")
        token = service.issue(42, email="u@efportal.com")

        assert service.validate(token) == 42

    @pytest.mark.unit
    def test_expiry_is_24_hours(self):
        service = TokenService("secret")
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)
        token = service.issue(7, now=issued_at)

        claims = jwt.get_unverified_claims(token)
        assert claims["exp"] - claims["iat"] == 24 * 60 * 60
        assert claims["sub"] == "7"

    @pytest.mark.unit
    def test_valid_just_before_expiry(self):
        service = TokenService("secret")
        token = service.issue(7, now=datetime.now(timezone.utc) - timedelta(hours=23, minutes=59))

        assert service.validate(token) == 7

    @pytest.mark.unit
    def test_expired_token_rejected(self):
        service = TokenService("secret")
        token = service.issue(7, now=datetime.now(timezone.utc) - timedelta(hours=25))

        with pytest.raises(InvalidTokenError):
            service.validate(token)

    @pytest.mark.unit
    def test_other_secret_rejected(self):
        token = TokenService("other-secret").issue(7)

        with pytest.raises(InvalidTokenError):
            TokenService("secret").validate(token)

    @pytest.mark.unit
    def test_malformed_token_rejected(self):
        with pytest.raises(InvalidTokenError):
            TokenService("secret").validate("not.a.token")

    @pytest.mark.unit
    def test_non_numeric_subject_rejected(self):
        token = jwt.encode(
            {"sub": "alice", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "secret",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            TokenService("secret").validate(token)


class TestMasking:

    @pytest.mark.unit
    def test_mask_card_number(self):
        assert mask_card_number("4111111111111111") == "************1111"
        assert mask_card_number("12") == "****"
        assert mask_card_number(None) == "****"
