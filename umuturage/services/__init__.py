"""Service layer for Umuturage."""

from .notifications import NotificationService

__all__ = [
    "NotificationService",
]
