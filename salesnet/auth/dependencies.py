"""
FastAPI dependencies for authentication.

The current user is resolved from the JWT cookie against the `users`
collection of the local store and handed to services explicitly.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.auth.jwt import get_token_from_cookie, verify_token
from salesnet.db import get_db
from salesnet.models.user import UserStatus
from salesnet.schemas.user import User
from salesnet.services.repository import USERS, load_collection


async def _load_user(db: AsyncSession, user_id: str) -> Optional[User]:
    users = await load_collection(db, USERS)
    return next((u for u in users if u.id == user_id), None)


async def get_current_user_optional(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """
    Current user from the JWT cookie, or None.

    Use for routes that work with or without authentication.
    """
    token = get_token_from_cookie(request)
    if not token:
        return None

    payload = verify_token(token)
    if not payload:
        return None

    user = await _load_user(db, payload["user_id"])
    if not user or user.status != UserStatus.APPROVED:
        return None
    return user


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Current authenticated user.

    Raises 401 if not authenticated, 403 if the account is not approved.
    """
    token = get_token_from_cookie(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    payload = verify_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    user = await _load_user(db, payload["user_id"])
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if user.status != UserStatus.APPROVED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is not approved",
        )

    return user


async def require_privileged(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Require admin or master.

    Raises 403 otherwise.
    """
    if not current_user.is_privileged:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user
