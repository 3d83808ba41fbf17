"""User management API endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.auth.dependencies import get_current_user, require_privileged
from salesnet.db import get_db
from salesnet.models.user import UserStatus
from salesnet.schemas.user import User, UserApprove, UserCreate, UserResponse, UserUpdate
from salesnet.services import users as user_service
from salesnet.services.backend import RemoteBackend, get_backend
from salesnet.services.repository import load_snapshot
from salesnet.services.visibility import filter_for_user

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("")
async def list_users(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Approved users visible to the current user."""
    visible = filter_for_user(current_user, await load_snapshot(db))
    items = sorted(visible.users, key=lambda u: u.name.lower())
    return {"items": [UserResponse.model_validate(u) for u in items]}


@router.get("/pending")
async def list_pending_users(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_privileged),
):
    """Registrations waiting for approval."""
    snapshot = await load_snapshot(db)
    pending = [u for u in snapshot.users if u.status == UserStatus.PENDING]
    pending.sort(key=lambda u: u.created_at)
    return {"items": [UserResponse.model_validate(u) for u in pending]}


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(require_privileged),
):
    """Create an approved user."""
    user = await user_service.add_user(db, backend, current_user, data)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(get_current_user),
):
    user = await user_service.update_user(db, backend, current_user, user_id, data)
    return UserResponse.model_validate(user)


@router.post("/{user_id}/approve", response_model=UserResponse)
async def approve_user(
    user_id: str,
    data: UserApprove,
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(require_privileged),
):
    user = await user_service.approve_user(db, backend, current_user, user_id, data.leader_id)
    return UserResponse.model_validate(user)


@router.post("/{user_id}/reject", response_model=UserResponse)
async def reject_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(require_privileged),
):
    user = await user_service.reject_user(db, backend, current_user, user_id)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(require_privileged),
):
    await user_service.delete_user(db, backend, current_user, user_id)
    return {"success": True}
