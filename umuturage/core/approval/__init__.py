"""Household approval workflow for Umuturage.

Implements the review chain village → cell → sector as one state machine
parametrized by tier.
"""

from .states import HouseholdStatus, HouseholdTransition, TRANSITION_RULES, TERMINAL_STATES
from .service import ApprovalService

__all__ = [
    "HouseholdStatus",
    "HouseholdTransition",
    "TRANSITION_RULES",
    "TERMINAL_STATES",
    "ApprovalService",
]
