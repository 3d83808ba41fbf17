"""
Authentication API endpoints.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.auth.dependencies import get_current_user
from salesnet.auth.jwt import clear_auth_cookie, create_access_token, set_auth_cookie
from salesnet.db import get_db
from salesnet.models.user import UserStatus
from salesnet.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from salesnet.schemas.user import User, UserResponse
from salesnet.services import users as user_service
from salesnet.services.backend import RemoteBackend, get_backend

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    response: Response,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate by email and password and set the JWT cookie."""
    user = await user_service.authenticate(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if user.status == UserStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account awaiting approval",
        )
    if user.status == UserStatus.REJECTED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account registration was rejected",
        )

    token = create_access_token(user.id, user.role.value)
    set_auth_cookie(response, token)
    logger.info(f"User {user.id} logged in")

    return LoginResponse(
        success=True,
        message="Login successful",
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
):
    """Create a pending account; an admin has to approve it before login."""
    user = await user_service.register_user(db, backend, data.name, data.email, data.password)
    return UserResponse.model_validate(user)


@router.post("/logout")
async def logout(response: Response):
    """Clear the JWT cookie."""
    clear_auth_cookie(response)
    return {"success": True, "message": "Logged out"}


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)
