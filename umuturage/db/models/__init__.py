"""Database models for Umuturage."""

from umuturage.db.models.user import User
from umuturage.db.models.unit import Sector, Cell, Village, Isibo
from umuturage.db.models.household import Household, HouseholdHistory
from umuturage.db.models.notification import (
    Notification,
    NotificationStatus,
    NotificationType,
)

__all__ = [
    "User",
    "Sector",
    "Cell",
    "Village",
    "Isibo",
    "Household",
    "HouseholdHistory",
    "Notification",
    "NotificationStatus",
    "NotificationType",
]
