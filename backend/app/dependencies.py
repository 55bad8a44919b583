"""
Dependency injection functions for the API.
"""

import uuid
from typing import Optional

from fastapi import Cookie, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.errors import Unauthorized
from app.core.security import verify_token
from app.db.models import User
from app.db.session import get_db


# Database dependency
db_dependency = get_db

# Tokens are issued by the identity provider; tokenUrl only feeds the docs
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="api/auth/token",
    auto_error=False,  # Don't auto-raise errors to allow cookie fallback
)


async def get_token(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token_cookie: Optional[str] = Cookie(None),
) -> str:
    """
    Extract token from either Authorization header or cookie.

    Prioritizes the Authorization header token if available.
    """
    if token:
        return token
    if access_token_cookie:
        return access_token_cookie

    raise Unauthorized("Not authenticated")


async def get_current_user(
    token: str = Depends(get_token), db: Session = Depends(db_dependency)
) -> User:
    """
    Resolve the caller from a JWT token.

    The token subject must name an active user known to this service.
    """
    try:
        payload = verify_token(token)
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise Unauthorized("Invalid authentication credentials")

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise Unauthorized("Invalid authentication credentials")

    return user
