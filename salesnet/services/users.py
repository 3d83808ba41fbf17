"""
User management: registration, approval, creation, update and deletion.

Every operation receives the acting user explicitly. The local store is
written first, then the change is mirrored.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.auth.password import hash_password, verify_password
from salesnet.models import SyncOperation
from salesnet.models.user import CareerLevel, UserRole, UserStatus
from salesnet.schemas.user import User, UserCreate, UserUpdate
from salesnet.services.backend import RemoteBackend
from salesnet.services.errors import Conflict, NotFound, PermissionDenied, ValidationFailed
from salesnet.services.levels import level_index
from salesnet.services.org_graph import would_create_cycle
from salesnet.services.repository import (
    CONTRACTS,
    USERS,
    load_collection,
    new_id,
    save_collection,
)
from salesnet.services.seed import build_master_user
from salesnet.services.sync import mirror_write

logger = logging.getLogger(__name__)


def require_privileged(actor: User) -> None:
    if not actor.is_privileged:
        raise PermissionDenied("Admin access required")


def _find(users: List[User], user_id: str) -> User:
    user = next((u for u in users if u.id == user_id), None)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    return user


def _check_email_free(users: List[User], email: str, exclude_id: Optional[str] = None) -> None:
    wanted = email.strip().lower()
    for u in users:
        if u.id != exclude_id and u.email.lower() == wanted:
            raise Conflict(f"A user with email {email} already exists")


def validate_leader(user_id: str, leader_id: Optional[str], users: List[User]) -> None:
    """
    A leader must be another approved commercial and must not close a loop.

    Raises:
        ValidationFailed: describing the first violated rule
    """
    if not leader_id:
        return
    if leader_id == user_id:
        raise ValidationFailed("A user can not be their own leader")

    leader = next((u for u in users if u.id == leader_id), None)
    if leader is None:
        raise ValidationFailed(f"Leader {leader_id} does not exist")
    if leader.status != UserStatus.APPROVED:
        raise ValidationFailed("Leader must be an approved user")
    if leader.role != UserRole.COMMERCIAL:
        raise ValidationFailed("Leader must be a commercial user")
    if would_create_cycle(user_id, leader_id, users):
        raise ValidationFailed("Leader assignment would create a cycle in the organization")


def check_role_change(user: User, role: UserRole, users: List[User]) -> None:
    """
    Only commercials lead: a user with followers must stay commercial.

    Raises:
        ValidationFailed: if `user` would leave the commercial role while
            other users still follow it
    """
    if role == UserRole.COMMERCIAL or user.role != UserRole.COMMERCIAL:
        return
    followers = [u.id for u in users if u.leader_id == user.id]
    if followers:
        raise ValidationFailed(
            f"User leads {len(followers)} commercials. Reassign the team members "
            f"before changing the role."
        )


def _pin_level(user: User) -> User:
    """Admin and master always sit at managing_director."""
    if user.is_privileged and user.level != CareerLevel.MANAGING_DIRECTOR:
        return user.model_copy(update={"level": CareerLevel.MANAGING_DIRECTOR})
    return user


async def _commit_user(
    db: AsyncSession,
    backend: RemoteBackend,
    users: List[User],
    user: User,
) -> None:
    await save_collection(db, USERS, users)
    await mirror_write(db, backend, USERS, user.id, SyncOperation.UPSERT, user)


async def authenticate(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """Return the user matching the credentials, or None."""
    users = await load_collection(db, USERS)
    wanted = email.strip().lower()
    user = next((u for u in users if u.email.lower() == wanted), None)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


async def register_user(
    db: AsyncSession,
    backend: RemoteBackend,
    name: str,
    email: str,
    password: str,
) -> User:
    """Self-registration: creates a pending commercial account."""
    users = await load_collection(db, USERS)
    _check_email_free(users, email)

    user = User(
        id=new_id(),
        name=name.strip(),
        email=email.strip(),
        role=UserRole.COMMERCIAL,
        status=UserStatus.PENDING,
        level=CareerLevel.JUNIOR,
        password_hash=hash_password(password),
        created_at=datetime.now(timezone.utc),
    )
    users.append(user)
    await _commit_user(db, backend, users, user)
    logger.info(f"Registration received for {user.email}")
    return user


async def add_user(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    data: UserCreate,
) -> User:
    """Create an approved user directly (admin/master only)."""
    require_privileged(actor)
    if not data.name.strip() or not data.email.strip():
        raise ValidationFailed("Name, email and role are required")

    users = await load_collection(db, USERS)
    _check_email_free(users, data.email)

    user_id = new_id()
    if data.leader_id and data.role != UserRole.COMMERCIAL:
        raise ValidationFailed("Only commercial users can have a leader")
    validate_leader(user_id, data.leader_id, users)

    now = datetime.now(timezone.utc)
    user = _pin_level(
        User(
            id=user_id,
            name=data.name.strip(),
            email=data.email.strip(),
            role=data.role,
            status=UserStatus.APPROVED,
            level=data.level,
            leader_id=data.leader_id,
            admin_id=actor.id,
            password_hash=hash_password(data.password),
            created_at=now,
            approved_at=now,
        )
    )
    users.append(user)
    await _commit_user(db, backend, users, user)
    logger.info(f"User {user.email} created by {actor.id}")
    return user


async def approve_user(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    user_id: str,
    leader_id: Optional[str] = None,
) -> User:
    """Approve a pending registration and attach it to a leader."""
    require_privileged(actor)
    users = await load_collection(db, USERS)
    user = _find(users, user_id)
    if user.status != UserStatus.PENDING:
        raise ValidationFailed("Only pending users can be approved")

    validate_leader(user_id, leader_id, users)

    approved = user.model_copy(
        update={
            "status": UserStatus.APPROVED,
            "leader_id": leader_id,
            "admin_id": actor.id,
            "approved_at": datetime.now(timezone.utc),
        }
    )
    users = [approved if u.id == user_id else u for u in users]
    await _commit_user(db, backend, users, approved)
    logger.info(f"User {user_id} approved by {actor.id} (leader={leader_id})")
    return approved


async def reject_user(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    user_id: str,
) -> User:
    """Reject a pending registration."""
    require_privileged(actor)
    users = await load_collection(db, USERS)
    user = _find(users, user_id)
    if user.status != UserStatus.PENDING:
        raise ValidationFailed("Only pending users can be rejected")

    rejected = user.model_copy(update={"status": UserStatus.REJECTED})
    users = [rejected if u.id == user_id else u for u in users]
    await _commit_user(db, backend, users, rejected)
    logger.info(f"User {user_id} rejected by {actor.id}")
    return rejected


async def update_user(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    user_id: str,
    data: UserUpdate,
) -> User:
    """
    Update a user.

    Admin/master may change anything; a commercial may only change its own
    name, email and password.
    """
    changes = data.model_dump(exclude_unset=True)
    if not actor.is_privileged:
        if actor.id != user_id or set(changes) - {"name", "email", "password"}:
            raise PermissionDenied("Admin access required")

    users = await load_collection(db, USERS)
    user = _find(users, user_id)

    if "email" in changes and changes["email"]:
        _check_email_free(users, changes["email"], exclude_id=user_id)

    role = changes.get("role") or user.role
    check_role_change(user, role, users)
    if role != UserRole.COMMERCIAL:
        if changes.get("leader_id"):
            raise ValidationFailed("Only commercial users can have a leader")
        if user.leader_id:
            changes["leader_id"] = None
    elif changes.get("leader_id"):
        validate_leader(user_id, changes["leader_id"], users)

    # Nulls are only meaningful for leader_id (detach from a leader)
    changes = {k: v for k, v in changes.items() if v is not None or k == "leader_id"}
    if "password" in changes:
        changes["password_hash"] = hash_password(changes.pop("password"))

    new_level = changes.get("level")
    if new_level is not None and level_index(new_level) < level_index(user.level):
        logger.warning(
            f"User {user_id} demoted from {CareerLevel(user.level).value} to "
            f"{CareerLevel(new_level).value} by {actor.id}"
        )

    updated = _pin_level(user.model_copy(update=changes))
    users = [updated if u.id == user_id else u for u in users]
    await _commit_user(db, backend, users, updated)
    logger.info(f"User {user_id} updated by {actor.id}: {sorted(changes)}")
    return updated


async def delete_user(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    user_id: str,
) -> None:
    """
    Delete a user with no contracts and no followers.

    Raises:
        Conflict: if contracts reference the user or users follow it
    """
    require_privileged(actor)
    if actor.id == user_id:
        raise ValidationFailed("You can not delete your own account")

    users = await load_collection(db, USERS)
    _find(users, user_id)

    contracts = await load_collection(db, CONTRACTS)
    if any(c.involves(user_id) for c in contracts):
        raise Conflict(
            "Cannot delete user: they have contracts. Delete the related contracts first."
        )
    if any(u.leader_id == user_id for u in users):
        raise Conflict(
            "Cannot delete user: they lead other commercials. Reassign the team members first."
        )

    users = [u for u in users if u.id != user_id]
    await save_collection(db, USERS, users)
    await mirror_write(db, backend, USERS, user_id, SyncOperation.DELETE)
    logger.info(f"User {user_id} deleted by {actor.id}")


async def ensure_master_account(db: AsyncSession) -> None:
    """Add the configured master account if no master exists (startup)."""
    users = await load_collection(db, USERS)
    if any(u.role == UserRole.MASTER for u in users):
        return
    master = build_master_user()
    if any(u.id == master.id or u.email.lower() == master.email.lower() for u in users):
        logger.warning("Master account id/email already taken by another user")
        return
    users.append(master)
    await save_collection(db, USERS, users)
    logger.info(f"Master account created: {master.email}")
