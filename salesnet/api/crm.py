"""CRM API endpoints: clients, consultants, deals."""

from typing import Type

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.auth.dependencies import get_current_user
from salesnet.db import get_db
from salesnet.schemas.crm import (
    Client,
    ClientCreate,
    ClientUpdate,
    Consultant,
    ConsultantCreate,
    ConsultantUpdate,
    Deal,
    DealCreate,
    DealUpdate,
)
from salesnet.schemas.user import User
from salesnet.services import crm as crm_service
from salesnet.services.backend import RemoteBackend, get_backend
from salesnet.services.repository import CLIENTS, CONSULTANTS, DEALS

router = APIRouter(prefix="/crm", tags=["CRM"])


def _register(
    collection: str,
    model: Type[BaseModel],
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
) -> None:
    """Add list/create/update/delete routes for one CRM collection."""

    @router.get(f"/{collection}", name=f"list_{collection}")
    async def list_items(
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        items = await crm_service.list_records(db, current_user, collection)
        items.sort(key=lambda r: r.created_at, reverse=True)
        return {"items": items}

    @router.post(
        f"/{collection}",
        response_model=model,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{collection}",
    )
    async def create_item(
        data: create_model,
        db: AsyncSession = Depends(get_db),
        backend: RemoteBackend = Depends(get_backend),
        current_user: User = Depends(get_current_user),
    ):
        return await crm_service.create_record(db, backend, current_user, collection, data)

    @router.patch(f"/{collection}/{{record_id}}", response_model=model, name=f"update_{collection}")
    async def update_item(
        record_id: str,
        data: update_model,
        db: AsyncSession = Depends(get_db),
        backend: RemoteBackend = Depends(get_backend),
        current_user: User = Depends(get_current_user),
    ):
        return await crm_service.update_record(
            db, backend, current_user, collection, record_id, data,
        )

    @router.delete(f"/{collection}/{{record_id}}", name=f"delete_{collection}")
    async def delete_item(
        record_id: str,
        db: AsyncSession = Depends(get_db),
        backend: RemoteBackend = Depends(get_backend),
        current_user: User = Depends(get_current_user),
    ):
        await crm_service.delete_record(db, backend, current_user, collection, record_id)
        return {"success": True}


_register(CLIENTS, Client, ClientCreate, ClientUpdate)
_register(CONSULTANTS, Consultant, ConsultantCreate, ConsultantUpdate)
_register(DEALS, Deal, DealCreate, DealUpdate)
