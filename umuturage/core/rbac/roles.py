"""Role and tier definitions for the Umuturage hierarchy.

The administrative tree runs sector → cell → village → isibo. Every tier has
exactly one leader role; the three upper tiers review household submissions
coming up from the isibo tier.
"""

from enum import Enum
from typing import Dict, List, Optional


class UserRole(str, Enum):
    """Roles a user account can hold."""

    ADMIN = "admin"
    SECTOR_LEADER = "sector_leader"
    CELL_LEADER = "cell_leader"
    VILLAGE_LEADER = "village_leader"
    ISIBO_LEADER = "isibo_leader"


class Tier(str, Enum):
    """Levels of the administrative containment hierarchy."""

    SECTOR = "sector"
    CELL = "cell"
    VILLAGE = "village"
    ISIBO = "isibo"


# Tiers that review household submissions, in review order
REVIEW_TIERS: List[Tier] = [Tier.VILLAGE, Tier.CELL, Tier.SECTOR]

# Leader role for each tier
TIER_ROLES: Dict[Tier, UserRole] = {
    Tier.SECTOR: UserRole.SECTOR_LEADER,
    Tier.CELL: UserRole.CELL_LEADER,
    Tier.VILLAGE: UserRole.VILLAGE_LEADER,
    Tier.ISIBO: UserRole.ISIBO_LEADER,
}

# Parent tier of each tier (the sector is the root)
PARENT_TIERS: Dict[Tier, Optional[Tier]] = {
    Tier.SECTOR: None,
    Tier.CELL: Tier.SECTOR,
    Tier.VILLAGE: Tier.CELL,
    Tier.ISIBO: Tier.VILLAGE,
}

# Roles that may not be chosen at self-registration
PRIVILEGED_ROLES = {UserRole.ADMIN}


def role_for_tier(tier: Tier) -> UserRole:
    """Get the leader role for a tier."""
    return TIER_ROLES[tier]
