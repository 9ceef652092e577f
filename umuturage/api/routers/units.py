"""Administrative unit endpoints.

Admins build the sector → cell → village → isibo tree and assign one leader
per unit.
"""

from typing import Dict, List
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from umuturage.api.deps import get_db, get_current_user
from umuturage.api.schemas.unit import LeaderAssignment, UnitCreate, UnitResponse
from umuturage.core.errors import NotFoundOrUnauthorized, ValidationError
from umuturage.core.rbac import PARENT_TIERS, Tier, UserRole, require_role, role_for_tier
from umuturage.db.models import Cell, Isibo, Sector, User, Village

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/units", tags=["units"])

UNIT_MODELS = {
    Tier.SECTOR: Sector,
    Tier.CELL: Cell,
    Tier.VILLAGE: Village,
    Tier.ISIBO: Isibo,
}

# Column holding the parent id on each child tier
PARENT_COLUMNS: Dict[Tier, str] = {
    Tier.CELL: "sector_id",
    Tier.VILLAGE: "cell_id",
    Tier.ISIBO: "village_id",
}


def _to_response(tier: Tier, unit) -> UnitResponse:
    parent_column = PARENT_COLUMNS.get(tier)
    return UnitResponse(
        id=unit.id,
        tier=tier,
        name=unit.name,
        parent_id=getattr(unit, parent_column) if parent_column else None,
        leader_id=unit.leader_id,
        created_at=unit.created_at,
    )


@router.get("/{tier}", response_model=List[UnitResponse])
@require_role(UserRole.ADMIN)
async def list_units(
    tier: Tier,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List all units of a tier."""
    model = UNIT_MODELS[tier]
    units = db.query(model).order_by(model.name).all()
    return [_to_response(tier, u) for u in units]


@router.post("/{tier}", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
@require_role(UserRole.ADMIN)
async def create_unit(
    tier: Tier,
    unit_in: UnitCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a unit under its parent."""
    model = UNIT_MODELS[tier]
    values = {"name": unit_in.name.strip()}
    if not values["name"]:
        raise ValidationError("Name is required")
    
    parent_tier = PARENT_TIERS[tier]
    if parent_tier is not None:
        if unit_in.parent_id is None:
            raise ValidationError(f"A {tier.value} needs a parent {parent_tier.value}")
        parent = db.get(UNIT_MODELS[parent_tier], unit_in.parent_id)
        if not parent:
            raise NotFoundOrUnauthorized(f"Parent {parent_tier.value} not found")
        values[PARENT_COLUMNS[tier]] = parent.id
    
    unit = model(**values)
    db.add(unit)
    db.commit()
    db.refresh(unit)
    
    logger.info("Created %s %s (%s)", tier.value, unit.name, unit.id)
    return _to_response(tier, unit)


@router.put("/{tier}/{unit_id}/leader", response_model=UnitResponse)
@require_role(UserRole.ADMIN)
async def assign_leader(
    tier: Tier,
    unit_id: UUID,
    assignment: LeaderAssignment,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Assign or clear the leader of a unit."""
    model = UNIT_MODELS[tier]
    unit = db.get(model, unit_id)
    if not unit:
        raise NotFoundOrUnauthorized(f"{tier.value.capitalize()} not found")
    
    if assignment.leader_id is not None:
        leader = db.get(User, assignment.leader_id)
        if not leader:
            raise NotFoundOrUnauthorized("User not found")
        
        expected_role = role_for_tier(tier)
        if leader.role != expected_role.value:
            raise ValidationError(f"Leader must have the {expected_role.value} role")
        
        already_leading = db.query(model).filter(
            model.leader_id == leader.id,
            model.id != unit.id,
        ).first()
        if already_leading:
            raise ValidationError(f"User already leads {tier.value} {already_leading.name}")
    
    unit.leader_id = assignment.leader_id
    db.commit()
    db.refresh(unit)
    
    logger.info("Set leader of %s %s to %s", tier.value, unit.id, assignment.leader_id)
    return _to_response(tier, unit)
