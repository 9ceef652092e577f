"""Initial schema: users, administrative units, households, notifications

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Tables added:
- users: Accounts with one role each
- sectors, cells, villages, isibos: Administrative tree with one leader per unit
- households: Household submissions and their workflow status
- household_history: Approval transition audit trail
- notifications: Messages for isibo leaders
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _unit_table(name: str, parent: Union[tuple, None] = None) -> None:
    """Create one administrative unit table, optionally under a parent."""
    columns = [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
    ]
    constraints = [
        sa.PrimaryKeyConstraint("id", name=f"pk_{name}"),
        sa.ForeignKeyConstraint(["leader_id"], ["users.id"], name=f"fk_{name}_leader_id", ondelete="SET NULL"),
        sa.UniqueConstraint("leader_id", name=f"uq_{name}_leader_id"),
    ]
    if parent:
        parent_column, parent_table = parent
        columns.append(sa.Column(parent_column, postgresql.UUID(as_uuid=True), nullable=False))
        constraints.append(
            sa.ForeignKeyConstraint([parent_column], [f"{parent_table}.id"], name=f"fk_{name}_{parent_column}")
        )
    columns += [
        sa.Column("leader_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
    ]
    op.create_table(name, *columns, *constraints)
    if parent:
        op.create_index(f"ix_{name}_{parent[0]}", name, [parent[0]])


def upgrade() -> None:
    """Create all tables."""

    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(50), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    # --- administrative tree ---
    _unit_table("sectors")
    _unit_table("cells", ("sector_id", "sectors"))
    _unit_table("villages", ("cell_id", "cells"))
    _unit_table("isibos", ("village_id", "villages"))

    # --- households ---
    op.create_table(
        "households",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("isibo_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("submitted_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("head", sa.String(255), nullable=False),
        sa.Column("members", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("location", sa.String(512), nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending"),
        sa.Column("cell_approved_at", sa.DateTime(), nullable=True),
        sa.Column("sector_approved_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id", name="pk_households"),
        sa.ForeignKeyConstraint(["isibo_id"], ["isibos.id"], name="fk_households_isibo_id"),
        sa.ForeignKeyConstraint(["submitted_by"], ["users.id"], name="fk_households_submitted_by", ondelete="SET NULL"),
        sa.CheckConstraint("members >= 0", name="ck_households_members_non_negative"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'cell_approved', 'sector_approved', 'rejected')",
            name="ck_households_status_valid",
        ),
    )
    op.create_index("ix_households_isibo_id", "households", ["isibo_id"])
    op.create_index("ix_households_submitted_by", "households", ["submitted_by"])
    op.create_index("ix_households_status", "households", ["status"])
    op.create_index("ix_households_created_at", "households", ["created_at"])

    # --- household_history ---
    op.create_table(
        "household_history",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("household_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("from_status", sa.String(50), nullable=False),
        sa.Column("to_status", sa.String(50), nullable=False),
        sa.Column("transition", sa.String(50), nullable=False),
        sa.Column("tier", sa.String(50), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id", name="pk_household_history"),
        sa.ForeignKeyConstraint(["household_id"], ["households.id"], name="fk_household_history_household_id", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_household_history_user_id", ondelete="SET NULL"),
    )
    op.create_index("ix_household_history_household_id", "household_history", ["household_id"])
    op.create_index("ix_household_history_created_at", "household_history", ["created_at"])

    # --- notifications ---
    op.create_table(
        "notifications",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("recipient_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("household_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("type", sa.String(50), nullable=False, server_default="info"),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="unread"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id", name="pk_notifications"),
        sa.ForeignKeyConstraint(["recipient_id"], ["users.id"], name="fk_notifications_recipient_id", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["household_id"], ["households.id"], name="fk_notifications_household_id", ondelete="SET NULL"),
    )
    op.create_index("ix_notifications_recipient_id", "notifications", ["recipient_id"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("notifications")
    op.drop_table("household_history")
    op.drop_table("households")
    op.drop_table("isibos")
    op.drop_table("villages")
    op.drop_table("cells")
    op.drop_table("sectors")
    op.drop_table("users")
