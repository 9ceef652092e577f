"""Role-based access control for Umuturage.

Defines the shared role and tier enums and the endpoint guard built on them.
"""

from .roles import (
    UserRole,
    Tier,
    REVIEW_TIERS,
    TIER_ROLES,
    PARENT_TIERS,
    role_for_tier,
)
from .checker import has_role, require_role

__all__ = [
    "UserRole",
    "Tier",
    "REVIEW_TIERS",
    "TIER_ROLES",
    "PARENT_TIERS",
    "role_for_tier",
    "has_role",
    "require_role",
]
