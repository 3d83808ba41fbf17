"""CRM schemas: clients, consultants, deals."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from salesnet.models.crm import (
    ClientStatus,
    ConsultantAvailability,
    ConsultantExperience,
    DealStatus,
)
from salesnet.schemas.common import UTCDateTime


class CRMRecord(BaseModel):
    """Fields shared by every CRM record, used for visibility scoping."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    created_by: str
    assigned_to: Optional[str] = None
    created_at: UTCDateTime


class Client(CRMRecord):
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    notes: Optional[str] = None
    status: ClientStatus = ClientStatus.PROSPECT
    last_contact: Optional[UTCDateTime] = None


class Consultant(CRMRecord):
    name: str
    email: str
    phone: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    experience: ConsultantExperience = ConsultantExperience.JUNIOR
    availability: ConsultantAvailability = ConsultantAvailability.AVAILABLE
    daily_rate: Optional[Decimal] = None
    notes: Optional[str] = None
    last_contact: Optional[UTCDateTime] = None


class Deal(CRMRecord):
    title: str
    client_id: str
    client_name: str
    consultant_id: Optional[str] = None
    consultant_name: Optional[str] = None
    value: Decimal
    daily_margin: Optional[Decimal] = None
    status: DealStatus = DealStatus.CV_SENT
    probability: int = Field(default=0, ge=0, le=100)
    expected_close_date: UTCDateTime
    notes: Optional[str] = None
    updated_at: UTCDateTime


# ── Request bodies ────────────────────────────────────────


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    company: Optional[str] = Field(None, max_length=255)
    position: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=4000)
    status: ClientStatus = ClientStatus.PROSPECT
    assigned_to: Optional[str] = None
    last_contact: Optional[datetime] = None


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    company: Optional[str] = Field(None, max_length=255)
    position: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=4000)
    status: Optional[ClientStatus] = None
    assigned_to: Optional[str] = None
    last_contact: Optional[datetime] = None


class ConsultantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    skills: List[str] = Field(default_factory=list)
    experience: ConsultantExperience = ConsultantExperience.JUNIOR
    availability: ConsultantAvailability = ConsultantAvailability.AVAILABLE
    daily_rate: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=4000)
    assigned_to: Optional[str] = None
    last_contact: Optional[datetime] = None


class ConsultantUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    skills: Optional[List[str]] = None
    experience: Optional[ConsultantExperience] = None
    availability: Optional[ConsultantAvailability] = None
    daily_rate: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=4000)
    assigned_to: Optional[str] = None
    last_contact: Optional[datetime] = None


class DealCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    client_id: str = Field(..., min_length=1)
    client_name: str = Field(..., min_length=1, max_length=255)
    consultant_id: Optional[str] = None
    consultant_name: Optional[str] = Field(None, max_length=255)
    value: Decimal = Field(..., ge=0)
    daily_margin: Optional[Decimal] = Field(None, ge=0)
    status: DealStatus = DealStatus.CV_SENT
    probability: int = Field(default=0, ge=0, le=100)
    expected_close_date: datetime
    notes: Optional[str] = Field(None, max_length=4000)
    assigned_to: Optional[str] = None


class DealUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    client_id: Optional[str] = Field(None, min_length=1)
    client_name: Optional[str] = Field(None, min_length=1, max_length=255)
    consultant_id: Optional[str] = None
    consultant_name: Optional[str] = Field(None, max_length=255)
    value: Optional[Decimal] = Field(None, ge=0)
    daily_margin: Optional[Decimal] = Field(None, ge=0)
    status: Optional[DealStatus] = None
    probability: Optional[int] = Field(None, ge=0, le=100)
    expected_close_date: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=4000)
    assigned_to: Optional[str] = None
