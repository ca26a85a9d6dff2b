"""Auth service: login, user management and password reset by code."""

import secrets
from datetime import datetime, timedelta
from typing import List, Optional

import structlog
from sqlalchemy.orm import Session

from storefront.config import get_settings
from storefront.core.clock import as_utc, utcnow
from storefront.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    ForbiddenException,
    InvalidOrExpiredCodeException,
    UnauthorizedException,
    ValidationException,
)
from storefront.core.security import create_access_token
from storefront.domain.models.location import Location
from storefront.domain.models.user import User
from storefront.domain.schemas.auth import ProfileUpdate, UserCreate, UserUpdate
from storefront.infrastructure.code_sender import CodeSender

logger = structlog.get_logger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise EntityNotFoundException("User not found")
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user or not user.check_password(password):
        return None
    return user


def issue_token(user: User) -> str:
    """Role claims are for client display only; the server re-reads the user on every request."""
    return create_access_token(
        data={
            "sub": str(user.id),
            "isAdmin": user.is_admin,
            "isSuperAdmin": user.is_super_admin,
            "locationId": user.location_id,
        }
    )


def login(db: Session, email: str, password: str) -> tuple[User, str]:
    user = authenticate_user(db, email, password)
    if user is None:
        logger.info("Login failed", email=email)
        raise UnauthorizedException("Invalid email or password")
    logger.info("User logged in", user_id=user.id)
    return user, issue_token(user)


def _ensure_email_free(db: Session, email: str, exclude_user_id: Optional[int] = None) -> None:
    existing = get_user_by_email(db, email)
    if existing and existing.id != exclude_user_id:
        raise ConflictException("User already exists", [{"field": "email", "message": "Email is already registered"}])


def _ensure_location(db: Session, location_id: Optional[int]) -> None:
    if location_id is not None and db.get(Location, location_id) is None:
        raise ValidationException.for_field("locationId", "Location not found")


def create_user(
    db: Session,
    email: str,
    password: str,
    is_admin: bool = False,
    is_super_admin: bool = False,
    location_id: Optional[int] = None,
    name: Optional[str] = None,
    whatsapp_number: Optional[str] = None,
) -> User:
    _ensure_email_free(db, email)
    _ensure_location(db, location_id)

    user = User(
        email=email,
        is_admin=is_admin,
        is_super_admin=is_super_admin,
        location_id=location_id,
        name=name,
        whatsapp_number=whatsapp_number,
    )
    user.password = password
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User created", user_id=user.id, is_admin=user.is_admin, is_super_admin=user.is_super_admin)
    return user


def register_user(db: Session, actor: User, body: UserCreate) -> User:
    """Create a user on behalf of an admin.

    Only super-admins may mint super-admins or home a user at another store.
    """
    location_id = body.location_id
    if not actor.is_super_admin:
        if body.is_super_admin:
            raise ForbiddenException("Only super administrators can create super administrators")
        location_id = actor.location_id

    return create_user(
        db,
        email=body.email,
        password=body.password,
        is_admin=body.is_admin,
        is_super_admin=body.is_super_admin,
        location_id=location_id,
        name=body.name,
        whatsapp_number=body.whatsapp_number,
    )


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.id).all()


def update_user(db: Session, user_id: int, body: UserUpdate) -> User:
    user = get_user(db, user_id)
    data = body.model_dump(exclude_unset=True)

    if data.get("email") is not None:
        _ensure_email_free(db, data["email"], exclude_user_id=user.id)
    if "location_id" in data:
        _ensure_location(db, data["location_id"])

    password = data.pop("password", None)
    for field, value in data.items():
        if field in ("email", "is_admin", "is_super_admin") and value is None:
            continue
        setattr(user, field, value)
    if password:
        user.password = password

    db.commit()
    db.refresh(user)
    logger.info("User updated", user_id=user.id, fields=sorted(data), password_changed=bool(password))
    return user


def delete_user(db: Session, actor: User, user_id: int) -> None:
    user = get_user(db, user_id)
    if user.id == actor.id:
        raise ValidationException("You cannot delete your own account")
    db.delete(user)
    db.commit()
    logger.info("User deleted", user_id=user_id, by=actor.id)


def update_profile(db: Session, user: User, body: ProfileUpdate) -> User:
    if body.new_password:
        if not body.current_password:
            raise ValidationException.for_field(
                "currentPassword", "Current password is required when setting a new password"
            )
        if not user.check_password(body.current_password):
            raise ValidationException.for_field("currentPassword", "Current password is incorrect")
        user.password = body.new_password

    if body.email is not None and body.email != user.email:
        _ensure_email_free(db, body.email, exclude_user_id=user.id)
        user.email = body.email
    if "name" in body.model_fields_set:
        user.name = body.name
    if "whatsapp_number" in body.model_fields_set:
        user.whatsapp_number = body.whatsapp_number

    db.commit()
    db.refresh(user)
    logger.info("Profile updated", user_id=user.id, password_changed=bool(body.new_password))
    return user


# --- Password reset ---------------------------------------------------------


def generate_reset_code() -> str:
    return f"{secrets.randbelow(900000) + 100000}"


def request_password_reset(
    db: Session,
    whatsapp_number: str,
    sender: CodeSender,
    now: Optional[datetime] = None,
) -> User:
    """Idle -> CodeIssued. Reissuing replaces any pending code."""
    user = db.query(User).filter(User.whatsapp_number == whatsapp_number).first()
    if user is None:
        raise EntityNotFoundException("No user found with this WhatsApp number")

    now = now or utcnow()
    code = generate_reset_code()
    user.reset_password_code = code
    user.reset_password_expires = now + timedelta(minutes=get_settings().RESET_CODE_TTL_MINUTES)
    db.commit()

    sender.send_reset_code(whatsapp_number, code)
    logger.info("Password reset requested", user_id=user.id, expires=user.reset_password_expires.isoformat())
    return user


def _user_with_valid_code(db: Session, whatsapp_number: str, code: str, now: Optional[datetime]) -> User:
    user = db.query(User).filter(User.whatsapp_number == whatsapp_number).first()
    now = now or utcnow()
    if (
        user is None
        or user.reset_password_code is None
        or user.reset_password_expires is None
        or not secrets.compare_digest(user.reset_password_code.encode(), code.encode())
        or as_utc(user.reset_password_expires) <= now
    ):
        raise InvalidOrExpiredCodeException()
    return user


def verify_reset_code(db: Session, whatsapp_number: str, code: str, now: Optional[datetime] = None) -> User:
    """Checks the code without consuming it; reset_password checks again."""
    return _user_with_valid_code(db, whatsapp_number, code, now)


def reset_password(
    db: Session,
    whatsapp_number: str,
    code: str,
    new_password: str,
    now: Optional[datetime] = None,
) -> User:
    """CodeIssued -> Idle."""
    user = _user_with_valid_code(db, whatsapp_number, code, now)
    user.password = new_password
    user.reset_password_code = None
    user.reset_password_expires = None
    db.commit()
    logger.info("Password reset completed", user_id=user.id)
    return user
