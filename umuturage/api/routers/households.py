"""Household submission endpoints for isibo leaders."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from umuturage.api.deps import get_db, get_current_user
from umuturage.api.schemas.household import (
    HouseholdActionResponse,
    HouseholdCreate,
    HouseholdHistoryResponse,
    HouseholdListResponse,
    HouseholdResponse,
    HouseholdUpdate,
)
from umuturage.core.approval import ApprovalService
from umuturage.core.rbac import Tier, UserRole, require_role
from umuturage.db.models import User

router = APIRouter(prefix="/isibo/households", tags=["households"])


@router.post("", response_model=HouseholdActionResponse, status_code=status.HTTP_201_CREATED)
@require_role(UserRole.ISIBO_LEADER)
async def submit_household(
    household_in: HouseholdCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Submit a household for village review."""
    service = ApprovalService(db)
    household = service.submit(
        current_user.id,
        household_in.head,
        household_in.members,
        household_in.location,
    )
    db.commit()
    return HouseholdActionResponse(message="Household submitted!", household=HouseholdResponse(**household))


@router.get("", response_model=HouseholdListResponse)
@require_role(UserRole.ISIBO_LEADER)
async def list_households(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the households of the caller's isibo."""
    service = ApprovalService(db)
    households = service.list_submissions(current_user.id)
    return HouseholdListResponse(households=[HouseholdResponse(**h) for h in households])


@router.put("/{household_id}", response_model=HouseholdActionResponse)
@require_role(UserRole.ISIBO_LEADER)
async def update_household(
    household_id: UUID,
    household_in: HouseholdUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Edit a household that is still awaiting village review."""
    service = ApprovalService(db)
    household = service.update_submission(
        current_user.id,
        household_id,
        household_in.head,
        household_in.members,
        household_in.location,
    )
    db.commit()
    return HouseholdActionResponse(message="Household updated!", household=HouseholdResponse(**household))


@router.delete("/{household_id}", response_model=HouseholdActionResponse)
@require_role(UserRole.ISIBO_LEADER)
async def delete_household(
    household_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a household of the caller's isibo."""
    service = ApprovalService(db)
    household = service.delete_submission(current_user.id, household_id)
    db.commit()
    return HouseholdActionResponse(message="Household deleted!", household=HouseholdResponse(**household))


@router.get("/{household_id}/history", response_model=List[HouseholdHistoryResponse])
@require_role(UserRole.ISIBO_LEADER)
async def get_household_history(
    household_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get the approval history of one of the caller's households."""
    service = ApprovalService(db)
    history = service.get_history(current_user.id, household_id, Tier.ISIBO)
    return [HouseholdHistoryResponse(**h) for h in history]
