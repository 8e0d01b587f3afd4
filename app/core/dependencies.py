from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from app.core.database import get_db
from app.core.exceptions import InvalidTokenError, UnauthenticatedError
from app.core.security import TokenService, get_token_service
from app.modules.users.repository import UserRepository
from app.modules.users.schemas import ProjectedUser

logger = logging.getLogger(__name__)

# auto_error=False so a missing header goes through the same rejection path
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
) -> ProjectedUser:
    """Resolve the caller from the bearer token or reject with 401"""
    if credentials is None or not credentials.credentials:
        logger.info("Rejected request: missing_token")
        raise UnauthenticatedError(reason="missing_token")

    try:
        user_id = token_service.validate(credentials.credentials)
    except InvalidTokenError as exc:
        logger.info(f"Rejected request: invalid_token ({exc})")
        raise UnauthenticatedError(reason="invalid_token")

    user = await UserRepository(db).find_by_id(user_id)
    if user is None:
        logger.info(f"Rejected request: user_not_found (user {user_id})")
        raise UnauthenticatedError(reason="user_not_found")

    return user
