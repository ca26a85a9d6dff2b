"""Auth API routes: login, password reset, profile and user management."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.application.services import auth_service
from storefront.domain.models.user import User
from storefront.domain.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    ProfileResponse,
    ProfileUpdate,
    ResetPasswordRequest,
    TokenResponse,
    UserCreate,
    UserRead,
    UserUpdate,
    VerifyResetCodeRequest,
    VerifyResetCodeResponse,
)
from storefront.domain.schemas.base import MessageResponse
from storefront.infrastructure.code_sender import CodeSender
from storefront.infrastructure.database import get_db
from storefront.interfaces.api.deps import get_current_user, require_admin, require_super_admin
from storefront.interfaces.deps import get_code_sender

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user, token = auth_service.login(db, body.email, body.password)
    return TokenResponse(token=token, user=UserRead.model_validate(user))


@router.get("/me", response_model=UserRead)
@router.get("/profile", response_model=UserRead)
def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    user = auth_service.update_profile(db, user, body)
    return ProfileResponse(message="Profile updated successfully", user=UserRead.model_validate(user))


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    body: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    sender: CodeSender = Depends(get_code_sender),
):
    auth_service.request_password_reset(db, body.whatsapp_number, sender)
    return MessageResponse(message="Verification code sent to your WhatsApp")


@router.post("/verify-reset-code", response_model=VerifyResetCodeResponse)
def verify_reset_code(body: VerifyResetCodeRequest, db: Session = Depends(get_db)):
    user = auth_service.verify_reset_code(db, body.whatsapp_number, body.code)
    return VerifyResetCodeResponse(message="Code verified successfully", user_id=user.id)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(body: ResetPasswordRequest, db: Session = Depends(get_db)):
    auth_service.reset_password(db, body.whatsapp_number, body.code, body.new_password)
    return MessageResponse(message="Password reset successfully")


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    body: UserCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    user = auth_service.register_user(db, admin, body)
    return UserRead.model_validate(user)


@router.get("/users", response_model=List[UserRead])
def list_users(
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
):
    return [UserRead.model_validate(u) for u in auth_service.list_users(db)]


@router.put("/users/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    body: UserUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
):
    return UserRead.model_validate(auth_service.update_user(db, user_id, body))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
):
    auth_service.delete_user(db, admin, user_id)
    return MessageResponse(message="User removed")
