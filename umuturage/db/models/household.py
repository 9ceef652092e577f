"""Household submission models.

Stores household records and the history of their approval transitions.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from umuturage.db.base import Base


class Household(Base):
    """
    A household submitted by an isibo leader.
    
    Moves through village, cell and sector review; see
    ``umuturage.core.approval.states`` for the transition table.
    """
    __tablename__ = "households"
    __table_args__ = (
        CheckConstraint("members >= 0", name="ck_households_members_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'cell_approved', 'sector_approved', 'rejected')",
            name="ck_households_status_valid",
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    isibo_id = Column(UUID(as_uuid=True), ForeignKey("isibos.id"), nullable=False, index=True)
    submitted_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    
    # Household details
    head = Column(String(255), nullable=False)
    members = Column(Integer, nullable=False, default=0)
    location = Column(String(512), nullable=False)
    
    # Workflow state
    status = Column(String(50), nullable=False, default="pending", index=True)
    cell_approved_at = Column(DateTime, nullable=True)
    sector_approved_at = Column(DateTime, nullable=True)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    isibo = relationship("Isibo", back_populates="households")
    submitter = relationship("User", foreign_keys=[submitted_by])
    history = relationship(
        "HouseholdHistory",
        back_populates="household",
        order_by="HouseholdHistory.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    def __repr__(self) -> str:
        return f"<Household {self.head} [{self.status}]>"


class HouseholdHistory(Base):
    """
    Records every approval transition of a household.
    """
    __tablename__ = "household_history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    household_id = Column(UUID(as_uuid=True), ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Transition details
    from_status = Column(String(50), nullable=False)
    to_status = Column(String(50), nullable=False)
    transition = Column(String(50), nullable=False)
    tier = Column(String(50), nullable=False)
    
    # Actor
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    
    # Relationships
    household = relationship("Household", back_populates="history")
    user = relationship("User")
    
    def __repr__(self) -> str:
        return f"<HouseholdHistory {self.from_status} -> {self.to_status}>"
