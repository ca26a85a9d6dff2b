"""Pydantic schemas for User and Auth."""

from typing import Annotated, Optional

from pydantic import AfterValidator, EmailStr, Field

from storefront.domain.schemas.base import CamelModel, UtcDatetime


class UserRead(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    whatsapp_number: Optional[str] = None
    is_admin: bool
    is_super_admin: bool
    location_id: Optional[int] = None
    created_at: Optional[UtcDatetime] = None


class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    is_admin: bool = False
    is_super_admin: bool = False
    location_id: Optional[int] = None
    name: Optional[str] = None
    whatsapp_number: Optional[str] = None


class UserUpdate(CamelModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    is_admin: Optional[bool] = None
    is_super_admin: Optional[bool] = None
    location_id: Optional[int] = None
    name: Optional[str] = None
    whatsapp_number: Optional[str] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    whatsapp_number: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(default=None, min_length=6)


class ProfileResponse(CamelModel):
    message: str
    user: UserRead


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserRead


def _six_digits(value: str) -> str:
    if len(value) != 6 or not (value.isascii() and value.isdigit()):
        raise ValueError("Code must be a 6-digit number")
    return value


SixDigitCode = Annotated[str, AfterValidator(_six_digits)]


class ForgotPasswordRequest(CamelModel):
    whatsapp_number: str = Field(min_length=1)


class VerifyResetCodeRequest(CamelModel):
    whatsapp_number: str = Field(min_length=1)
    code: SixDigitCode


class VerifyResetCodeResponse(CamelModel):
    message: str
    user_id: int


class ResetPasswordRequest(CamelModel):
    whatsapp_number: str = Field(min_length=1)
    code: SixDigitCode
    new_password: str = Field(min_length=6)
