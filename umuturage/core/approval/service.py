"""Approval service for household submissions.

Owns the household lifecycle: submission by an isibo leader, review by the
village, cell and sector leaders, and the owner's edits and deletes. Every
status change is a single conditional UPDATE matched on id, expected status
and the caller's administrative scope, so concurrent reviewers can never
apply the same transition twice.
"""

import logging
from datetime import datetime
from typing import Optional, Dict, Any, List
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from umuturage.core.errors import NotFoundOrUnauthorized, StoreError, ValidationError
from umuturage.core.rbac.roles import Tier
from umuturage.db.models import Household, HouseholdHistory, Isibo, Village, Cell, Sector
from umuturage.services.notifications import NotificationService
from .states import (
    HouseholdStatus,
    HouseholdTransition,
    QUEUE_ORDER_FIELDS,
    get_awaiting_state,
    get_rule,
    is_review_tier,
)

logger = logging.getLogger(__name__)

# Column limits on the households table
HEAD_MAX_LENGTH = 255
LOCATION_MAX_LENGTH = 512
MAX_MEMBERS = 2**31 - 1


class ApprovalService:
    """
    Household approval workflow engine.

    Handles:
    - Submitting households at ``pending``
    - Listing each reviewer's queue
    - Approve (advance) and reject (revert) per tier
    - Transition history
    - Owner edits and deletes
    """

    def __init__(self, db: Session, notifier: Optional[NotificationService] = None):
        """
        Initialize the approval service.

        Args:
            db: Database session, scoped to the current request
            notifier: Notification sink; defaults to one on the same session
        """
        self.db = db
        self.notifier = notifier or NotificationService(db)

    # ------------------------------------------------------------------
    # Submissions
    # ------------------------------------------------------------------

    def submit(
        self,
        isibo_leader_id: UUID,
        head: str,
        members: int,
        location: str,
    ) -> Dict[str, Any]:
        """
        Create a household at ``pending`` in the caller's isibo.

        Raises:
            ValidationError: If members is negative or a field is blank
            NotFoundOrUnauthorized: If the caller leads no isibo
        """
        head, members, location = self._validate_details(head, members, location)

        try:
            isibo = self.db.query(Isibo).filter(Isibo.leader_id == isibo_leader_id).first()
            if not isibo:
                raise NotFoundOrUnauthorized("No isibo is assigned to this leader")

            household = Household(
                isibo_id=isibo.id,
                submitted_by=isibo_leader_id,
                head=head,
                members=members,
                location=location,
                status=HouseholdStatus.PENDING.value,
            )
            self.db.add(household)
            self.db.flush()
        except SQLAlchemyError as e:
            raise self._store_error("submit", isibo_leader_id=isibo_leader_id) from e

        logger.info("Household %s submitted by %s in isibo %s", household.id, isibo_leader_id, isibo.id)
        self.notifier.notify_event(
            "household_submitted", isibo_leader_id, head=head, household_id=household.id
        )
        return self._household_to_dict(household)

    def list_submissions(self, isibo_leader_id: UUID) -> List[Dict[str, Any]]:
        """Get the households of the caller's isibo, newest first."""
        try:
            households = self.db.query(Household).filter(
                Household.isibo_id.in_(self._scope(Tier.ISIBO, isibo_leader_id))
            ).order_by(Household.created_at.desc()).all()
        except SQLAlchemyError as e:
            raise self._store_error("list_submissions", isibo_leader_id=isibo_leader_id) from e

        return [self._household_to_dict(h) for h in households]

    def update_submission(
        self,
        isibo_leader_id: UUID,
        household_id: UUID,
        head: str,
        members: int,
        location: str,
    ) -> Dict[str, Any]:
        """
        Edit a household's details while it still awaits village review.

        The status is never changed here.

        Raises:
            ValidationError: If the new details are invalid
            NotFoundOrUnauthorized: If the household is absent, outside the
                caller's isibo, or already under review
        """
        head, members, location = self._validate_details(head, members, location)

        stmt = (
            update(Household)
            .where(
                Household.id == household_id,
                Household.status == HouseholdStatus.PENDING.value,
                Household.isibo_id.in_(self._scope(Tier.ISIBO, isibo_leader_id)),
            )
            .values(head=head, members=members, location=location, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )

        try:
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                logger.warning("Rejected edit of household %s by %s", household_id, isibo_leader_id)
                raise NotFoundOrUnauthorized("Household not found or can no longer be edited")
            household = self.db.get(Household, household_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise self._store_error("update_submission", household_id=household_id) from e

        self.notifier.notify_event(
            "household_updated", isibo_leader_id, head=head, household_id=household_id
        )
        return self._household_to_dict(household)

    def delete_submission(self, isibo_leader_id: UUID, household_id: UUID) -> Dict[str, Any]:
        """
        Delete a household of the caller's isibo, whatever its status.

        Raises:
            NotFoundOrUnauthorized: If the household is absent or outside the
                caller's isibo
        """
        try:
            household = self.db.query(Household).filter(
                Household.id == household_id,
                Household.isibo_id.in_(self._scope(Tier.ISIBO, isibo_leader_id)),
            ).first()
            if not household:
                raise NotFoundOrUnauthorized("Household not found or you are not authorized")

            snapshot = self._household_to_dict(household)
            self.db.delete(household)
            self.db.flush()
        except SQLAlchemyError as e:
            raise self._store_error("delete_submission", household_id=household_id) from e

        logger.info("Household %s deleted by %s", household_id, isibo_leader_id)
        self.notifier.notify_event("household_deleted", isibo_leader_id, head=snapshot["head"])
        return snapshot

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def list_pending(self, reviewer_id: UUID, tier: Tier) -> List[Dict[str, Any]]:
        """
        Get the households awaiting ``tier`` review in the reviewer's unit.

        Returns an empty list when the reviewer leads no unit.
        """
        awaiting = self._awaiting(tier)
        order_column = getattr(Household, QUEUE_ORDER_FIELDS[tier])

        try:
            households = self.db.query(Household).options(
                joinedload(Household.isibo).joinedload(Isibo.village).joinedload(Village.cell)
            ).filter(
                Household.status == awaiting.value,
                Household.isibo_id.in_(self._scope(tier, reviewer_id)),
            ).order_by(order_column.desc(), Household.created_at.desc()).all()
        except SQLAlchemyError as e:
            raise self._store_error("list_pending", reviewer_id=reviewer_id, tier=tier.value) from e

        return [self._household_to_dict(h, with_units=True) for h in households]

    def advance(self, reviewer_id: UUID, household_id: UUID, tier: Tier) -> Dict[str, Any]:
        """
        Approve a household at ``tier``.

        Raises:
            NotFoundOrUnauthorized: If the household does not exist, is not
                awaiting ``tier`` review, or lies outside the reviewer's unit
        """
        return self._transition(reviewer_id, household_id, tier, HouseholdTransition.APPROVE)

    def revert(self, reviewer_id: UUID, household_id: UUID, tier: Tier) -> Dict[str, Any]:
        """
        Reject a household at ``tier``, sending it back one tier.

        Raises:
            NotFoundOrUnauthorized: Same conditions as ``advance``
        """
        return self._transition(reviewer_id, household_id, tier, HouseholdTransition.REJECT)

    def get_history(self, user_id: UUID, household_id: UUID, tier: Tier) -> List[Dict[str, Any]]:
        """
        Get the transition history of a household inside the user's unit.

        Raises:
            NotFoundOrUnauthorized: If the household is absent or outside the
                user's unit at ``tier``
        """
        try:
            household = self.db.query(Household.id).filter(
                Household.id == household_id,
                Household.isibo_id.in_(self._scope(tier, user_id)),
            ).first()
            if not household:
                raise NotFoundOrUnauthorized("Household not found or you are not authorized")

            history = self.db.query(HouseholdHistory).filter(
                HouseholdHistory.household_id == household_id
            ).order_by(HouseholdHistory.created_at.asc()).all()
        except SQLAlchemyError as e:
            raise self._store_error("get_history", household_id=household_id) from e

        return [self._history_to_dict(h) for h in history]

    def _transition(
        self,
        reviewer_id: UUID,
        household_id: UUID,
        tier: Tier,
        transition: HouseholdTransition,
    ) -> Dict[str, Any]:
        """Apply one transition with a compare-and-set on the current status."""
        self._awaiting(tier)
        rule = get_rule(tier, transition)
        now = datetime.utcnow()

        stmt = (
            update(Household)
            .where(
                Household.id == household_id,
                Household.status == rule.from_state.value,
                Household.isibo_id.in_(self._scope(tier, reviewer_id)),
            )
            .values(**rule.update_values(now))
            .execution_options(synchronize_session=False)
        )

        try:
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                logger.warning(
                    "Rejected %s of household %s by %s at %s tier",
                    transition.value, household_id, reviewer_id, tier.value,
                )
                raise NotFoundOrUnauthorized()

            self.db.add(HouseholdHistory(
                household_id=household_id,
                from_status=rule.from_state.value,
                to_status=rule.to_state.value,
                transition=transition.value,
                tier=tier.value,
                user_id=reviewer_id,
                created_at=now,
            ))
            self.db.flush()
            household = self.db.get(Household, household_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise self._store_error(
                transition.value, household_id=household_id, tier=tier.value
            ) from e

        logger.info(
            "Household %s %s -> %s by %s (%s)",
            household_id, rule.from_state.value, rule.to_state.value, reviewer_id, tier.value,
        )
        self.notifier.notify_event(
            f"{tier.value}_{transition.value}",
            household.submitted_by,
            head=household.head,
            household_id=household_id,
        )
        return self._household_to_dict(household)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _scope(self, tier: Tier, user_id: UUID):
        """Select the ids of isibos inside the unit ``user_id`` leads at ``tier``."""
        query = select(Isibo.id)
        if tier == Tier.ISIBO:
            return query.where(Isibo.leader_id == user_id)

        query = query.join(Village, Isibo.village_id == Village.id)
        if tier == Tier.VILLAGE:
            return query.where(Village.leader_id == user_id)

        query = query.join(Cell, Village.cell_id == Cell.id)
        if tier == Tier.CELL:
            return query.where(Cell.leader_id == user_id)

        query = query.join(Sector, Cell.sector_id == Sector.id)
        return query.where(Sector.leader_id == user_id)

    @staticmethod
    def _awaiting(tier: Tier) -> HouseholdStatus:
        if not is_review_tier(tier):
            raise ValueError(f"{tier.value} is not a reviewing tier")
        return get_awaiting_state(tier)

    @staticmethod
    def _validate_details(head: Optional[str], members: Optional[int], location: Optional[str]):
        """Normalize household details or raise ValidationError."""
        if head is None or not str(head).strip():
            raise ValidationError("Household head is required")
        if location is None or not str(location).strip():
            raise ValidationError("Location is required")
        if members is None or isinstance(members, bool) or not isinstance(members, int):
            raise ValidationError("Member count must be a whole number")
        if members < 0:
            raise ValidationError("Member count cannot be negative")
        if members > MAX_MEMBERS:
            raise ValidationError(f"Member count cannot exceed {MAX_MEMBERS}")
        head, location = str(head).strip(), str(location).strip()
        if len(head) > HEAD_MAX_LENGTH:
            raise ValidationError(f"Household head cannot exceed {HEAD_MAX_LENGTH} characters")
        if len(location) > LOCATION_MAX_LENGTH:
            raise ValidationError(f"Location cannot exceed {LOCATION_MAX_LENGTH} characters")
        return head, members, location

    @staticmethod
    def _store_error(action: str, **context) -> StoreError:
        # Must be called from inside an except block
        logger.exception("Store failure during %s %s", action, context)
        return StoreError()

    def _household_to_dict(self, household: Household, *, with_units: bool = False) -> Dict[str, Any]:
        """Convert a Household model to dictionary."""
        data = {
            "id": str(household.id),
            "isibo_id": str(household.isibo_id),
            "submitted_by": str(household.submitted_by) if household.submitted_by else None,
            "head": household.head,
            "members": household.members,
            "location": household.location,
            "status": household.status,
            "cell_approved_at": household.cell_approved_at.isoformat() if household.cell_approved_at else None,
            "sector_approved_at": household.sector_approved_at.isoformat() if household.sector_approved_at else None,
            "created_at": household.created_at.isoformat() if household.created_at else None,
            "updated_at": household.updated_at.isoformat() if household.updated_at else None,
        }
        if with_units:
            isibo = household.isibo
            data["isibo_name"] = isibo.name
            data["village_name"] = isibo.village.name
            data["cell_name"] = isibo.village.cell.name
        return data

    def _history_to_dict(self, entry: HouseholdHistory) -> Dict[str, Any]:
        """Convert a HouseholdHistory model to dictionary."""
        return {
            "id": str(entry.id),
            "household_id": str(entry.household_id),
            "from_status": entry.from_status,
            "to_status": entry.to_status,
            "transition": entry.transition,
            "tier": entry.tier,
            "user_id": str(entry.user_id) if entry.user_id else None,
            "created_at": entry.created_at.isoformat() if entry.created_at else None,
        }
