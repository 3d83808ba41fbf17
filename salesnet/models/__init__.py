"""
Database models for SalesNet.

All models are exported here for convenient imports:
    from salesnet.models import StoredDocument, SyncRecord, UserRow, etc.
"""

from salesnet.models.base import Base, RemoteBase
from salesnet.models.contract import ContractRow
from salesnet.models.crm import (
    ClientRow,
    ClientStatus,
    ConsultantAvailability,
    ConsultantExperience,
    ConsultantRow,
    DealRow,
    DealStatus,
)
from salesnet.models.document import StoredDocument
from salesnet.models.sync import SyncOperation, SyncRecord, SyncStatus
from salesnet.models.user import (
    PRIVILEGED_ROLES,
    CareerLevel,
    UserRole,
    UserRow,
    UserStatus,
)

__all__ = [
    # Base
    "Base",
    "RemoteBase",
    # Local store
    "StoredDocument",
    "SyncRecord",
    "SyncStatus",
    "SyncOperation",
    # User
    "UserRow",
    "UserRole",
    "UserStatus",
    "CareerLevel",
    "PRIVILEGED_ROLES",
    # Contract
    "ContractRow",
    # CRM
    "ClientRow",
    "ClientStatus",
    "ConsultantRow",
    "ConsultantExperience",
    "ConsultantAvailability",
    "DealRow",
    "DealStatus",
]
