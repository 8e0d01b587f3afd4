from fastapi import APIRouter, Depends, status, UploadFile, File, Form
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import ValidationError
from typing import Optional

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.core.exceptions import InvalidInputError
from app.core.security import TokenService, get_token_service
from app.modules.users import schemas, services

router = APIRouter(prefix="/api", tags=["users"])


@router.post("/signup", response_model=schemas.MessageResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: schemas.UserRegistrationRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new account.

    - Email must be unique
    - Starting balance is credited automatically
    """
    await services.UserService.register_user(db, user_data)
    return schemas.MessageResponse(message="Account created successfully")


@router.post("/signup-with-file", response_model=schemas.MessageResponse, status_code=status.HTTP_201_CREATED)
async def signup_with_file(
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    income: Optional[str] = Form(None),
    dob: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    nidImage: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new account with an identity-document image.

    Accepted formats: JPG, PNG, GIF, WEBP
    """
    try:
        user_data = schemas.UserRegistrationRequest(
            name=name,
            email=email,
            password=password,
            income=income,
            dob=dob,
            address=address
        )
    except ValidationError as exc:
        raise InvalidInputError.from_validation_errors(exc.errors()) from exc

    nid_picture = None
    if nidImage is not None and nidImage.filename:
        nid_picture = await services.UserService.save_identity_document(nidImage)

    try:
        await services.UserService.register_user(db, user_data, nid_picture=nid_picture)
    except Exception:
        if nid_picture:
            services.UserService.discard_identity_document(nid_picture)
        raise

    return schemas.MessageResponse(message="Account created successfully")


@router.post("/signin", response_model=schemas.SigninResponse)
async def signin(
    login_data: schemas.UserLoginRequest,
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
):
    """
    Sign in with email and password.

    - Returns a bearer token valid for 24 hours
    """
    return await services.UserService.authenticate_user(
        db,
        token_service,
        login_data.email,
        login_data.password
    )


@router.get("/user", response_model=schemas.UserResponse)
async def get_user(current_user: schemas.ProjectedUser = Depends(get_current_user)):
    """
    Get the authenticated user's profile.
    """
    return schemas.UserResponse(user=current_user)


@router.post("/user/change-password", response_model=schemas.MessageResponse)
async def change_password(
    password_data: schemas.PasswordChangeRequest,
    db: AsyncSession = Depends(get_db),
    current_user: schemas.ProjectedUser = Depends(get_current_user)
):
    """
    Change password.

    - Requires the current password
    - Existing tokens stay valid until they expire
    """
    await services.UserService.change_password(
        db,
        current_user.id,
        password_data.old_password,
        password_data.new_password
    )
    return schemas.MessageResponse(message="Password changed successfully")
