"""FastAPI dependencies: JWT authentication and role checks.

Roles are always read from the persisted User, never from token claims.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from storefront.core.exceptions import ForbiddenException, UnauthorizedException
from storefront.core.security import decode_access_token
from storefront.domain.models.user import User
from storefront.infrastructure.database import get_db

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Extract and validate the current user from JWT token."""
    if credentials is None:
        raise UnauthorizedException("Not authorized, no token")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Not authorized, token failed")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedException("Not authorized, token failed")

    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedException("Not authorized, user not found")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Require admin role (super-admins included)."""
    if not (user.is_admin or user.is_super_admin):
        raise ForbiddenException("Not authorized as an admin")
    return user


def require_super_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_super_admin:
        raise ForbiddenException("Not authorized as a super admin")
    return user
