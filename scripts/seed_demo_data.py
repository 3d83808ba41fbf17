"""
Seed a demo organization into the local store.

Usage:
    python scripts/seed_demo_data.py [--force]

Or with custom DATABASE_URL:
    DATABASE_URL="postgresql://..." python scripts/seed_demo_data.py

This script creates:
- partner -> team_leader -> senior -> junior chain of commercials
- One pending registration
- Contracts starting this month (one split between developer and recruiter)

Existing users and contracts are kept unless --force is given.
With --remote-schema the mirror tables are created on REMOTE_DATABASE_URL instead.
"""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from salesnet.db import engine, get_db_context
from salesnet.models import Base, UserRole
from salesnet.services.backend import get_backend
from salesnet.services.repository import CONTRACTS, USERS, load_collection, save_collection
from salesnet.services.seed import build_demo_organization, build_master_user


async def seed(force: bool = False):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with get_db_context() as db:
        users = await load_collection(db, USERS)
        if any(u.role != UserRole.MASTER for u in users) and not force:
            print("Users already present, nothing to do (use --force to overwrite)")
            return

        master = next((u for u in users if u.role == UserRole.MASTER), build_master_user())
        demo_users, demo_contracts = build_demo_organization()

        await save_collection(db, USERS, [master] + demo_users)
        await save_collection(db, CONTRACTS, demo_contracts)

    print("\n=== Demo data created ===\n")
    for user in demo_users:
        print(f"  - {user.email:<28} {user.level.value:<18} {user.status.value}")
    print(f"\nContracts: {len(demo_contracts)}")
    print("Password for every demo user: demo1234")


async def init_remote():
    """Create the mirror tables on the remote database."""
    backend = get_backend()
    if not backend.enabled:
        print("REMOTE_DATABASE_URL is not set")
        return
    await backend.create_schema()
    print("Remote mirror tables created")


if __name__ == "__main__":
    if "--remote-schema" in sys.argv:
        asyncio.run(init_remote())
    else:
        asyncio.run(seed(force="--force" in sys.argv))
