from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from datetime import datetime, timezone
from typing import Optional
from pathlib import Path
import secrets
import logging

from app.core.security import TokenService, get_password_hash, verify_password
from app.core.config import settings
from app.core.exceptions import InvalidCredentialsError, InvalidInputError, UnauthenticatedError
from app.modules.users.repository import UserRepository
from app.modules.users import schemas

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif', '.webp'}
UPLOADS_URL_PREFIX = "/uploads"


class UserService:
    """Service layer for signup, signin and credential changes"""

    @staticmethod
    async def register_user(
        db: AsyncSession,
        user_data: schemas.UserRegistrationRequest,
        nid_picture: Optional[str] = None
    ) -> int:
        """Register a new user and return its id"""
        hashed = await run_in_threadpool(get_password_hash, user_data.password)

        user_id = await UserRepository(db).create(
            name=user_data.name,
            email=user_data.email,
            hashed_password=hashed,
            monthly_income=user_data.income,
            date_of_birth=user_data.dob,
            address=user_data.address,
            nid_picture=nid_picture,
            balance=settings.STARTING_BALANCE,
        )
        await db.commit()

        logger.info(f"Registered user {user_id}")
        return user_id

    @staticmethod
    async def authenticate_user(
        db: AsyncSession,
        token_service: TokenService,
        email: str,
        password: str
    ) -> schemas.SigninResponse:
        """Verify credentials and mint a session token"""
        repository = UserRepository(db)
        user = await repository.find_by_email(email)

        # Same error for unknown email and wrong password
        if user is None:
            raise InvalidCredentialsError()
        if not await run_in_threadpool(verify_password, password, user.hashed_password):
            logger.info(f"Failed signin for user {user.id}")
            raise InvalidCredentialsError()

        token = token_service.issue(user.id, email=user.email)
        return schemas.SigninResponse(
            user=schemas.ProjectedUser.model_validate(user),
            token=token
        )

    @staticmethod
    async def change_password(db: AsyncSession, user_id: int, old_password: str, new_password: str) -> None:
        """Replace the password hash after checking the old password"""
        repository = UserRepository(db)
        current_hash = await repository.get_password_hash(user_id)
        if current_hash is None:
            raise UnauthenticatedError(reason="user_not_found")

        if not await run_in_threadpool(verify_password, old_password, current_hash):
            raise InvalidCredentialsError("Incorrect old password")

        new_hash = await run_in_threadpool(get_password_hash, new_password)
        await repository.update_password_hash(user_id, new_hash)
        await db.commit()

        logger.info(f"Password changed for user {user_id}")

    @staticmethod
    async def save_identity_document(file: UploadFile) -> str:
        """Store an uploaded identity-document image and return its public path"""
        file_ext = Path(file.filename or "").suffix.lower()
        if file_ext not in ALLOWED_IMAGE_EXTENSIONS:
            raise InvalidInputError(
                f"File type {file_ext or 'unknown'} not allowed. "
                f"Allowed types: {sorted(ALLOWED_IMAGE_EXTENSIONS)}"
            )

        content = await file.read()
        if len(content) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
            raise InvalidInputError(f"File exceeds {settings.MAX_UPLOAD_SIZE_MB} MB")

        # Generate unique filename
        timestamp = datetime.now(timezone.utc).strftime('%Y%m%d%H%M%S')
        filename = f"{timestamp}-{secrets.token_hex(4)}{file_ext}"

        upload_dir = Path(settings.LOCAL_STORAGE_PATH)
        upload_dir.mkdir(parents=True, exist_ok=True)
        await run_in_threadpool((upload_dir / filename).write_bytes, content)

        return f"{UPLOADS_URL_PREFIX}/{filename}"

    @staticmethod
    def discard_identity_document(reference: str) -> None:
        """Delete a stored document when the signup it belonged to failed"""
        path = Path(settings.LOCAL_STORAGE_PATH) / Path(reference).name
        path.unlink(missing_ok=True)
