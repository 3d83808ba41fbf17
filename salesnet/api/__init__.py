"""API router aggregation."""

from fastapi import APIRouter

from salesnet.api.auth import router as auth_router
from salesnet.api.contracts import router as contracts_router
from salesnet.api.crm import router as crm_router
from salesnet.api.dashboard import router as dashboard_router
from salesnet.api.health import router as health_router
from salesnet.api.sync import router as sync_router
from salesnet.api.users import router as users_router

# Main API router (for /api/* endpoints)
api_router = APIRouter(prefix="/api")

api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(contracts_router)
api_router.include_router(crm_router)
api_router.include_router(dashboard_router)
api_router.include_router(sync_router)

__all__ = ["api_router"]
