"""
SalesNet - sales network commission tracker

Main FastAPI application with:
- JWT cookie authentication (commercial/admin/master)
- Organization, contract and CRM management
- Career-level and commission dashboard
- Best-effort mirroring to a remote database
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from salesnet.api import api_router
from salesnet.auth.middleware import AuthMiddleware
from salesnet.config import settings
from salesnet.db import engine, get_db_context
from salesnet.models import Base
from salesnet.scheduler.jobs import scheduler, setup_scheduler
from salesnet.services.backend import get_backend
from salesnet.services.errors import ServiceError
from salesnet.services.sync import pull_remote
from salesnet.services.users import ensure_master_account

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Creates the local store tables
    - Hydrates empty collections from the remote mirror
    - Creates the master account if none exists
    - Starts the sync retry job

    Shutdown:
    - Stops the scheduler
    """
    logger.info("Starting SalesNet...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    backend = get_backend()
    async with get_db_context() as db:
        if backend.enabled:
            pulled = await pull_remote(db, backend, only_empty=True)
            if pulled:
                logger.info(f"Loaded from remote: {pulled}")
        else:
            logger.info("No remote database configured, running offline")

        await ensure_master_account(db)

    setup_scheduler()
    scheduler.start()

    logger.info("SalesNet started successfully!")

    yield

    logger.info("Shutting down SalesNet...")
    scheduler.shutdown(wait=False)


app = FastAPI(
    title="SalesNet",
    description="Sales network commission tracker",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

app.add_middleware(AuthMiddleware)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Domain errors become JSON responses with their own status code."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "salesnet.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
