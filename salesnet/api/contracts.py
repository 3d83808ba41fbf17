"""Contract API endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.auth.dependencies import get_current_user, require_privileged
from salesnet.db import get_db
from salesnet.schemas.contract import Contract, ContractCreate, ContractUpdate
from salesnet.schemas.user import User
from salesnet.services import contracts as contract_service
from salesnet.services.backend import RemoteBackend, get_backend
from salesnet.services.repository import load_snapshot
from salesnet.services.visibility import filter_for_user

router = APIRouter(prefix="/contracts", tags=["Contracts"])


@router.get("")
async def list_contracts(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Contracts of the current user's organization, newest first."""
    visible = filter_for_user(current_user, await load_snapshot(db))
    items = sorted(visible.contracts, key=lambda c: c.date, reverse=True)
    return {"items": items}


@router.post("", response_model=Contract, status_code=status.HTTP_201_CREATED)
async def create_contract(
    data: ContractCreate,
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(require_privileged),
):
    return await contract_service.create_contract(db, backend, current_user, data)


@router.patch("/{contract_id}", response_model=Contract)
async def update_contract(
    contract_id: str,
    data: ContractUpdate,
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(require_privileged),
):
    return await contract_service.update_contract(db, backend, current_user, contract_id, data)


@router.delete("/{contract_id}")
async def delete_contract(
    contract_id: str,
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(require_privileged),
):
    await contract_service.delete_contract(db, backend, current_user, contract_id)
    return {"success": True}
