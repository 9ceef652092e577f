"""Notification model."""

import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from umuturage.db.base import Base


class NotificationStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"


class NotificationType(str, Enum):
    """Kinds of notification written by the workflow."""
    INFO = "info"
    APPROVED = "approved"
    REJECTED = "rejected"


class Notification(Base):
    """
    Message for an isibo leader about one of their households.
    
    Rows are append-only.
    """
    __tablename__ = "notifications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    recipient_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    household_id = Column(UUID(as_uuid=True), ForeignKey("households.id", ondelete="SET NULL"), nullable=True)
    
    type = Column(String(50), nullable=False, default=NotificationType.INFO.value)
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=NotificationStatus.UNREAD.value)
    
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    
    # Relationships
    recipient = relationship("User")
    
    def __repr__(self) -> str:
        return f"<Notification {self.type} to {self.recipient_id}>"
