"""Household approval endpoints.

One router per reviewing tier, all built from the same factory:

- GET  /{tier}/pending-approvals
- PUT  /{tier}/pending-approvals/{household_id}/approve
- PUT  /{tier}/pending-approvals/{household_id}/reject
- GET  /{tier}/pending-approvals/{household_id}/history
"""

from typing import Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from umuturage.api.deps import get_db, get_current_user
from umuturage.api.schemas.household import (
    HouseholdActionResponse,
    HouseholdHistoryResponse,
    HouseholdResponse,
    PendingApprovalsResponse,
    PendingHouseholdResponse,
)
from umuturage.core.approval import ApprovalService
from umuturage.core.rbac import REVIEW_TIERS, Tier, require_role, role_for_tier
from umuturage.db.models import User

# Messages reported after each transition
APPROVE_MESSAGES = {
    Tier.VILLAGE: "Household approved at village level successfully",
    Tier.CELL: "Household approved at cell level successfully",
    Tier.SECTOR: "Household approved at sector level successfully",
}

REJECT_MESSAGES = {
    Tier.VILLAGE: "Household rejected",
    Tier.CELL: "Household rejected and sent back to village",
    Tier.SECTOR: "Household rejected and sent back to cell",
}


def build_router(tier: Tier) -> APIRouter:
    """Build the approval router for one reviewing tier."""
    leader_role = role_for_tier(tier)
    router = APIRouter(prefix=f"/{tier.value}/pending-approvals", tags=[f"{tier.value} approvals"])

    @router.get("", response_model=PendingApprovalsResponse)
    @require_role(leader_role)
    async def list_pending_approvals(
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        """List households awaiting review by the caller's unit."""
        service = ApprovalService(db)
        households = service.list_pending(current_user.id, tier)
        return PendingApprovalsResponse(
            households=[PendingHouseholdResponse(**h) for h in households],
            total=len(households),
        )

    @router.put("/{household_id}/approve", response_model=HouseholdActionResponse)
    @require_role(leader_role)
    async def approve_household(
        household_id: UUID,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        """Approve a household and pass it to the next tier."""
        service = ApprovalService(db)
        household = service.advance(current_user.id, household_id, tier)
        db.commit()
        return HouseholdActionResponse(
            message=APPROVE_MESSAGES[tier],
            household=HouseholdResponse(**household),
        )

    @router.put("/{household_id}/reject", response_model=HouseholdActionResponse)
    @require_role(leader_role)
    async def reject_household(
        household_id: UUID,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        """Reject a household, sending it back one tier."""
        service = ApprovalService(db)
        household = service.revert(current_user.id, household_id, tier)
        db.commit()
        return HouseholdActionResponse(
            message=REJECT_MESSAGES[tier],
            household=HouseholdResponse(**household),
        )

    @router.get("/{household_id}/history", response_model=List[HouseholdHistoryResponse])
    @require_role(leader_role)
    async def get_household_history(
        household_id: UUID,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ):
        """Get the approval history of a household in the caller's unit."""
        service = ApprovalService(db)
        history = service.get_history(current_user.id, household_id, tier)
        return [HouseholdHistoryResponse(**h) for h in history]

    return router


routers: Dict[Tier, APIRouter] = {tier: build_router(tier) for tier in REVIEW_TIERS}
