"""Administrative unit models.

The hierarchy is a strict tree: every isibo belongs to one village, every
village to one cell, every cell to one sector. Each unit has at most one
leader and a user leads at most one unit per tier.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from umuturage.db.base import Base


class Sector(Base):
    __tablename__ = "sectors"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    leader_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    leader = relationship("User")
    cells = relationship("Cell", back_populates="sector")

    def __repr__(self) -> str:
        return f"<Sector {self.name}>"


class Cell(Base):
    __tablename__ = "cells"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    sector_id = Column(UUID(as_uuid=True), ForeignKey("sectors.id"), nullable=False, index=True)
    leader_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    sector = relationship("Sector", back_populates="cells")
    leader = relationship("User")
    villages = relationship("Village", back_populates="cell")

    def __repr__(self) -> str:
        return f"<Cell {self.name}>"


class Village(Base):
    __tablename__ = "villages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    cell_id = Column(UUID(as_uuid=True), ForeignKey("cells.id"), nullable=False, index=True)
    leader_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    cell = relationship("Cell", back_populates="villages")
    leader = relationship("User")
    isibos = relationship("Isibo", back_populates="village")

    def __repr__(self) -> str:
        return f"<Village {self.name}>"


class Isibo(Base):
    __tablename__ = "isibos"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    village_id = Column(UUID(as_uuid=True), ForeignKey("villages.id"), nullable=False, index=True)
    leader_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    village = relationship("Village", back_populates="isibos")
    leader = relationship("User")
    households = relationship("Household", back_populates="isibo")

    def __repr__(self) -> str:
        return f"<Isibo {self.name}>"
