from pydantic import BaseModel, Field, validator
from email_validator import validate_email, EmailNotValidError
from typing import Optional
from datetime import date
from decimal import Decimal


# User Registration
class UserRegistrationRequest(BaseModel):
    """Signup request; income, dob and address are optional"""
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)
    income: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    dob: Optional[date] = None
    address: Optional[str] = None

    @validator('email')
    def check_email_format(cls, v):
        """Reject malformed addresses but store the email exactly as typed"""
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError(str(exc))
        return v

    @validator('income', 'dob', 'address', pre=True)
    def blank_to_none(cls, v):
        """Form submissions send empty strings for omitted fields"""
        if isinstance(v, str) and not v.strip():
            return None
        return v


# User Login
class UserLoginRequest(BaseModel):
    """Signin request"""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# Password Management
class PasswordChangeRequest(BaseModel):
    """Change password (authenticated)"""
    old_password: str = Field(..., alias="oldPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=1)

    class Config:
        populate_by_name = True


# User Profile
class ProjectedUser(BaseModel):
    """User view safe to return to clients; never carries the password hash"""
    id: int
    name: str
    email: str
    monthly_income: Optional[Decimal] = None
    balance: Decimal
    address: Optional[str] = None
    nid_picture: Optional[str] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class UserResponse(BaseModel):
    success: bool = True
    user: ProjectedUser


class SigninResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    user: ProjectedUser
    token: str
