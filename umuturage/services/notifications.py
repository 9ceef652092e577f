"""Notification service for workflow side effects.

Persists messages for isibo leaders about their households. Delivery is
best-effort: a failed write is logged and never rolls back the workflow
change that triggered it.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from umuturage.db.models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)


# Message templates keyed by event
MESSAGE_TEMPLATES = {
    "household_submitted": (NotificationType.INFO, "New household added: {head}"),
    "household_updated": (NotificationType.INFO, "Household updated: {head}"),
    "household_deleted": (NotificationType.INFO, "Household deleted: {head}"),
    "village_approve": (NotificationType.APPROVED, "Household approved by village: {head}"),
    "village_reject": (NotificationType.REJECTED, "Household rejected by village: {head}"),
    "cell_approve": (NotificationType.APPROVED, "Household approved by cell: {head}"),
    "cell_reject": (NotificationType.REJECTED, "Household sent back to village by cell: {head}"),
    "sector_approve": (NotificationType.APPROVED, "Household approved by sector: {head}"),
    "sector_reject": (NotificationType.REJECTED, "Household sent back to cell by sector: {head}"),
}


class NotificationService:
    """
    Writes notifications inside the caller's transaction.
    
    Each write runs in a SAVEPOINT so that a failure only discards the
    notification, not the surrounding unit of work.
    """
    
    def __init__(self, db: Session):
        self.db = db
    
    def notify(
        self,
        recipient_id: Optional[UUID],
        type: str,
        message: str,
        *,
        household_id: Optional[UUID] = None,
    ) -> Optional[Notification]:
        """
        Persist a notification.
        
        Args:
            recipient_id: User receiving the notification
            type: Notification type
            message: Message text
            household_id: Household the message is about
            
        Returns:
            The created notification, or None if it could not be written
        """
        if recipient_id is None:
            logger.warning("Dropping %s notification without recipient: %s", type, message)
            return None
        
        try:
            with self.db.begin_nested():
                notification = Notification(
                    recipient_id=recipient_id,
                    household_id=household_id,
                    type=type,
                    message=message,
                )
                self.db.add(notification)
                self.db.flush()
        except SQLAlchemyError:
            logger.exception(
                "Failed to write %s notification for user %s", type, recipient_id
            )
            return None
        
        logger.debug("Notified %s: %s", recipient_id, message)
        return notification
    
    def notify_event(
        self,
        event: str,
        recipient_id: Optional[UUID],
        *,
        head: str,
        household_id: Optional[UUID] = None,
    ) -> Optional[Notification]:
        """Persist a notification built from one of the message templates."""
        notification_type, template = MESSAGE_TEMPLATES[event]
        return self.notify(
            recipient_id,
            notification_type.value,
            template.format(head=head),
            household_id=household_id,
        )
