"""Household approval workflow states and transitions.

State Machine Diagram:

    ┌──────────┐  village reject   ┌──────────┐
    │ PENDING  │──────────────────►│ REJECTED │ (terminal)
    └────┬─────┘                   └──────────┘
         │ village approve   ▲
    ┌────▼─────┐             │ cell reject
    │ APPROVED │─────────────┘
    └────┬─────┘
         │ cell approve      ▲
    ┌────▼──────────┐        │ sector reject
    │ CELL_APPROVED │────────┘
    └────┬──────────┘
         │ sector approve
    ┌────▼────────────┐
    │ SECTOR_APPROVED │ (terminal)
    └─────────────────┘

Each reviewing tier acts on exactly one state. Rejects above the village
send the record back one tier.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Set, NamedTuple, Tuple

from umuturage.core.rbac.roles import Tier, REVIEW_TIERS


class HouseholdStatus(str, Enum):
    """States of a household submission."""

    PENDING = "pending"                   # Awaiting village review
    APPROVED = "approved"                 # Village approved, awaiting cell review
    CELL_APPROVED = "cell_approved"       # Cell approved, awaiting sector review
    SECTOR_APPROVED = "sector_approved"   # Accepted
    REJECTED = "rejected"                 # Rejected at village review


class HouseholdTransition(str, Enum):
    """Reviewer actions."""

    APPROVE = "approve"
    REJECT = "reject"


class TransitionRule(NamedTuple):
    """Defines a valid state transition for one reviewing tier."""
    tier: Tier
    transition: HouseholdTransition
    from_state: HouseholdStatus
    to_state: HouseholdStatus
    stamps: Tuple[str, ...] = ()
    clears: Tuple[str, ...] = ()

    def update_values(self, now: datetime) -> Dict[str, object]:
        """Column values written when this rule fires."""
        values: Dict[str, object] = {"status": self.to_state.value, "updated_at": now}
        for field in self.stamps:
            values[field] = now
        for field in self.clears:
            values[field] = None
        return values


TRANSITION_RULES: list[TransitionRule] = [
    # Village review
    TransitionRule(Tier.VILLAGE, HouseholdTransition.APPROVE,
                   HouseholdStatus.PENDING, HouseholdStatus.APPROVED),
    TransitionRule(Tier.VILLAGE, HouseholdTransition.REJECT,
                   HouseholdStatus.PENDING, HouseholdStatus.REJECTED),

    # Cell review
    TransitionRule(Tier.CELL, HouseholdTransition.APPROVE,
                   HouseholdStatus.APPROVED, HouseholdStatus.CELL_APPROVED,
                   stamps=("cell_approved_at",)),
    TransitionRule(Tier.CELL, HouseholdTransition.REJECT,
                   HouseholdStatus.APPROVED, HouseholdStatus.PENDING),

    # Sector review; sector_approved_at is never set while cell_approved,
    # clearing it is a no-op
    TransitionRule(Tier.SECTOR, HouseholdTransition.APPROVE,
                   HouseholdStatus.CELL_APPROVED, HouseholdStatus.SECTOR_APPROVED,
                   stamps=("sector_approved_at",)),
    TransitionRule(Tier.SECTOR, HouseholdTransition.REJECT,
                   HouseholdStatus.CELL_APPROVED, HouseholdStatus.APPROVED,
                   clears=("cell_approved_at", "sector_approved_at")),
]

# Build lookup tables for efficient access
RULES_BY_TIER: Dict[Tuple[Tier, HouseholdTransition], TransitionRule] = {}
AWAITING_STATE: Dict[Tier, HouseholdStatus] = {}

for rule in TRANSITION_RULES:
    RULES_BY_TIER[(rule.tier, rule.transition)] = rule
    AWAITING_STATE[rule.tier] = rule.from_state


TERMINAL_STATES: Set[HouseholdStatus] = {
    HouseholdStatus.SECTOR_APPROVED,
    HouseholdStatus.REJECTED,
}

# Timestamp that orders each tier's review queue, newest first
QUEUE_ORDER_FIELDS: Dict[Tier, str] = {
    Tier.VILLAGE: "created_at",
    Tier.CELL: "updated_at",
    Tier.SECTOR: "cell_approved_at",
}


def is_review_tier(tier: Tier) -> bool:
    """Check if a tier takes part in household review."""
    return tier in REVIEW_TIERS


def get_awaiting_state(tier: Tier) -> Optional[HouseholdStatus]:
    """Get the state a tier's reviewers act on."""
    return AWAITING_STATE.get(tier)


def get_rule(tier: Tier, transition: HouseholdTransition) -> Optional[TransitionRule]:
    """Get the transition rule for a tier/action combination."""
    return RULES_BY_TIER.get((tier, transition))

