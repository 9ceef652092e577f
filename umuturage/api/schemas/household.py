from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from umuturage.core.approval.service import HEAD_MAX_LENGTH, LOCATION_MAX_LENGTH, MAX_MEMBERS


class HouseholdCreate(BaseModel):
    head: str = Field(..., max_length=HEAD_MAX_LENGTH)
    members: int = Field(..., le=MAX_MEMBERS)
    location: str = Field(..., max_length=LOCATION_MAX_LENGTH)


class HouseholdUpdate(HouseholdCreate):
    pass


class HouseholdResponse(BaseModel):
    id: UUID
    isibo_id: UUID
    submitted_by: Optional[UUID]
    head: str
    members: int
    location: str
    status: str
    cell_approved_at: Optional[datetime]
    sector_approved_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class PendingHouseholdResponse(HouseholdResponse):
    isibo_name: str
    village_name: str
    cell_name: str


class HouseholdListResponse(BaseModel):
    households: List[HouseholdResponse]


class PendingApprovalsResponse(BaseModel):
    households: List[PendingHouseholdResponse]
    total: int


class HouseholdActionResponse(BaseModel):
    message: str
    household: HouseholdResponse


class HouseholdHistoryResponse(BaseModel):
    id: UUID
    household_id: UUID
    from_status: str
    to_status: str
    transition: str
    tier: str
    user_id: Optional[UUID]
    created_at: datetime
