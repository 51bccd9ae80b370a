# planner/core/auth/security.py

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from planner.config import settings
from planner.core.calendar.base import CalendarUser
from planner.core.users.models import User
from planner.db.base import get_async_db_session

from .schemas import TokenData

log = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# --- JWT helpers ---

def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token whose subject is ``user_id``.

    Args:
        user_id (str): Internal user id, stored in the 'sub' claim.
        expires_delta (Optional[timedelta]): Lifetime; defaults to
            ``settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES``.

    Returns:
        str: Encoded JWT.
    """
    if not user_id:
        raise ValueError("Missing user_id for JWT subject")
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": str(user_id), "exp": expire}
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    log.debug("Created JWT token for sub: %s", user_id)
    return encoded_jwt


def verify_token(token: str, credentials_exception: HTTPException) -> TokenData:
    """
    Decode and validate a JWT.

    Raises:
        HTTPException: ``credentials_exception`` when the token is malformed,
            expired or has no subject.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        user_id: Optional[str] = payload.get("sub")
        if user_id is None:
            log.warning("Token verification failed: 'sub' claim missing.")
            raise credentials_exception
        token_data = TokenData(user_id=user_id)
    except JWTError as e:
        log.warning("Token verification failed: JWTError - %s", e)
        raise credentials_exception from e
    except ValidationError as e:
        log.warning("Token verification failed: ValidationError - %s", e)
        raise credentials_exception from e

    log.debug("Token verified successfully for user_id: %s", token_data.user_id)
    return token_data


# --- FastAPI dependencies ---

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_db_session),
) -> User:
    """
    Resolve the authenticated user from the bearer token.

    Raises:
        HTTPException: 401 for a missing or invalid token, 404 when the
            token's user no longer exists.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        log.debug("Request without bearer credentials")
        raise credentials_exception

    token_data = verify_token(credentials.credentials, credentials_exception)

    user = await db.get(User, token_data.user_id)
    if user is None:
        log.error("User with id %s from valid token not found in DB.", token_data.user_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with id {token_data.user_id} not found",
        )
    log.debug("Authenticated user retrieved: %r", user)
    return user


async def get_calendar_user(current_user: User = Depends(get_current_user)) -> CalendarUser:
    """The current user as the calendar services see it."""
    return CalendarUser(id=current_user.id, timezone=current_user.timezone or settings.DEFAULT_TIMEZONE)


__all__ = [
    "bearer_scheme",
    "create_access_token",
    "get_calendar_user",
    "get_current_user",
    "verify_token",
]
