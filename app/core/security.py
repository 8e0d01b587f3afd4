from datetime import datetime, timedelta, timezone
from typing import Optional
from functools import lru_cache
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings
from app.core.exceptions import InvalidTokenError

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognizable hash
        return False


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


class TokenService:
    """Issues and validates signed, time-bounded bearer tokens"""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(hours=24)
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, user_id: int, email: Optional[str] = None, now: Optional[datetime] = None) -> str:
        """Create a token for ``user_id`` expiring ``expires_delta`` after ``now``"""
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        if email is not None:
            claims["email"] = email
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def validate(self, token: str) -> int:
        """Return the user id carried by ``token``.

        Malformed tokens, bad signatures, expired tokens and tokens without
        a usable subject all raise ``InvalidTokenError``.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        subject = payload.get("sub")
        try:
            return int(subject)
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError("Token subject is not a user id") from exc


@lru_cache()
def get_token_service() -> TokenService:
    """Process-wide token service built from settings"""
    return TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expires_delta=timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    )


def mask_card_number(card_number: str) -> str:
    """Mask card number showing only last 4 digits"""
    if not card_number or len(card_number) < 4:
        return "****"
    return f"************{card_number[-4:]}"
