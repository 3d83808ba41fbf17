"""Pydantic schemas for stored entities and API payloads."""

from salesnet.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from salesnet.schemas.contract import Contract, ContractCreate, ContractUpdate
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
from salesnet.schemas.dashboard import (
    DashboardMetrics,
    LevelRequirement,
    RequiredMembers,
    TeamEarningsResponse,
    TeamMember,
)
from salesnet.schemas.user import User, UserApprove, UserCreate, UserResponse, UserUpdate

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "Contract",
    "ContractCreate",
    "ContractUpdate",
    "Client",
    "ClientCreate",
    "ClientUpdate",
    "Consultant",
    "ConsultantCreate",
    "ConsultantUpdate",
    "Deal",
    "DealCreate",
    "DealUpdate",
    "DashboardMetrics",
    "LevelRequirement",
    "RequiredMembers",
    "TeamEarningsResponse",
    "TeamMember",
    "User",
    "UserApprove",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]
