# online_forms/schemas/user.py
from pydantic import AfterValidator, BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Annotated, Optional
from datetime import datetime
import re

PHONE_PATTERN = re.compile(r"^[+]?[\d\s\-()]+$")


def _check_phone(v: Optional[str]) -> Optional[str]:
    if v is not None and not PHONE_PATTERN.match(v):
        raise ValueError("Please provide a valid phone number")
    return v


PhoneNumber = Annotated[str, AfterValidator(_check_phone)]


class UserRegister(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    phone: Optional[PhoneNumber] = Field(None, max_length=20)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be between 2 and 100 characters")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()

    model_config = ConfigDict(title="UserRegister")


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    model_config = ConfigDict(title="UserLogin")


class RefreshTokenRequest(BaseModel):
    refresh_token: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6, max_length=100)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=100)


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[PhoneNumber] = Field(None, max_length=20)
    profile_image: Optional[str] = Field(None, max_length=255)


class UserStatusUpdate(BaseModel):
    is_active: bool


class UserSummary(BaseModel):
    id: str
    name: str
    email: EmailStr
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    id: str
    name: str
    email: EmailStr
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    role: str
    is_active: bool
    email_verified: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, title="UserResponse")
