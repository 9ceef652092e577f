from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from umuturage.core.rbac.roles import Tier


class UnitCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    parent_id: Optional[UUID] = None  # required for every tier below sector


class LeaderAssignment(BaseModel):
    leader_id: Optional[UUID] = None  # None clears the leader


class UnitResponse(BaseModel):
    id: UUID
    tier: Tier
    name: str
    parent_id: Optional[UUID]
    leader_id: Optional[UUID]
    created_at: datetime
