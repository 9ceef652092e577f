"""Tests for the per-tier approval endpoints."""

from uuid import uuid4

import pytest

from umuturage.core.approval import HouseholdStatus
from umuturage.core.rbac.roles import UserRole
from umuturage.db.models import Household
from tests.factories import create_hierarchy, create_household, create_user


pytestmark = [pytest.mark.db, pytest.mark.integration]


class TestPendingApprovals:

    def test_village_queue(self, client, db_session, hierarchy, auth_headers):
        household = create_household(db_session, isibo=hierarchy.isibo, head="Jane Doe")
        db_session.commit()

        response = client.get("/api/village/pending-approvals", headers=auth_headers(hierarchy.village_leader))

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        entry = data["households"][0]
        assert entry["id"] == str(household.id)
        assert entry["head"] == "Jane Doe"
        assert entry["status"] == "pending"
        assert entry["isibo_name"] == hierarchy.isibo.name
        assert entry["village_name"] == hierarchy.village.name
        assert entry["cell_name"] == hierarchy.cell.name

    def test_cell_queue_skips_other_states(self, client, db_session, hierarchy, auth_headers):
        create_household(db_session, isibo=hierarchy.isibo)
        awaiting = create_household(db_session, isibo=hierarchy.isibo, status=HouseholdStatus.APPROVED)
        db_session.commit()

        response = client.get("/api/cell/pending-approvals", headers=auth_headers(hierarchy.cell_leader))

        assert response.status_code == 200
        assert [h["id"] for h in response.json()["households"]] == [str(awaiting.id)]

    def test_empty_queue(self, client, hierarchy, auth_headers):
        response = client.get("/api/sector/pending-approvals", headers=auth_headers(hierarchy.sector_leader))

        assert response.status_code == 200
        assert response.json() == {"households": [], "total": 0}


class TestApproveReject:

    def test_full_approval_chain(self, client, db_session, hierarchy, auth_headers):
        household = create_household(db_session, isibo=hierarchy.isibo)
        db_session.commit()
        household_id = household.id

        response = client.put(
            f"/api/village/pending-approvals/{household_id}/approve",
            headers=auth_headers(hierarchy.village_leader),
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Household approved at village level successfully"
        assert response.json()["household"]["status"] == "approved"

        response = client.put(
            f"/api/cell/pending-approvals/{household_id}/approve",
            headers=auth_headers(hierarchy.cell_leader),
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Household approved at cell level successfully"
        assert response.json()["household"]["cell_approved_at"] is not None

        response = client.put(
            f"/api/sector/pending-approvals/{household_id}/approve",
            headers=auth_headers(hierarchy.sector_leader),
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Household approved at sector level successfully"
        assert response.json()["household"]["status"] == "sector_approved"

        response = client.get(
            f"/api/sector/pending-approvals/{household_id}/history",
            headers=auth_headers(hierarchy.sector_leader),
        )
        assert response.status_code == 200
        assert [h["to_status"] for h in response.json()] == ["approved", "cell_approved", "sector_approved"]

    def test_reject_messages(self, client, db_session, hierarchy, auth_headers):
        at_village = create_household(db_session, isibo=hierarchy.isibo)
        at_cell = create_household(db_session, isibo=hierarchy.isibo, status=HouseholdStatus.APPROVED)
        at_sector = create_household(db_session, isibo=hierarchy.isibo, status=HouseholdStatus.CELL_APPROVED)
        db_session.commit()

        cases = [
            ("village", at_village, hierarchy.village_leader, "Household rejected", "rejected"),
            ("cell", at_cell, hierarchy.cell_leader, "Household rejected and sent back to village", "pending"),
            ("sector", at_sector, hierarchy.sector_leader, "Household rejected and sent back to cell", "approved"),
        ]
        for tier, household, leader, message, status in cases:
            response = client.put(
                f"/api/{tier}/pending-approvals/{household.id}/reject",
                headers=auth_headers(leader),
            )
            assert response.status_code == 200
            assert response.json()["message"] == message
            assert response.json()["household"]["status"] == status

    def test_second_approval_is_not_found(self, client, db_session, hierarchy, auth_headers):
        household = create_household(db_session, isibo=hierarchy.isibo)
        db_session.commit()
        url = f"/api/village/pending-approvals/{household.id}/approve"
        headers = auth_headers(hierarchy.village_leader)

        assert client.put(url, headers=headers).status_code == 200
        response = client.put(url, headers=headers)

        assert response.status_code == 404
        assert response.json() == {
            "message": "Household not found or already processed",
            "code": "not_found",
        }

    def test_unrelated_leader_is_not_found(self, client, db_session, hierarchy, auth_headers):
        other = create_hierarchy(db_session)
        household = create_household(db_session, isibo=hierarchy.isibo, status=HouseholdStatus.APPROVED)
        db_session.commit()

        response = client.put(
            f"/api/cell/pending-approvals/{household.id}/approve",
            headers=auth_headers(other.cell_leader),
        )

        assert response.status_code == 404
        db_session.expire_all()
        assert db_session.get(Household, household.id).status == "approved"

    def test_unknown_household(self, client, hierarchy, auth_headers):
        response = client.put(
            f"/api/village/pending-approvals/{uuid4()}/reject",
            headers=auth_headers(hierarchy.village_leader),
        )
        assert response.status_code == 404

    def test_malformed_household_id(self, client, hierarchy, auth_headers):
        response = client.put(
            "/api/village/pending-approvals/not-a-uuid/approve",
            headers=auth_headers(hierarchy.village_leader),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"


class TestAccessControl:

    def test_wrong_tier_role(self, client, db_session, hierarchy, auth_headers):
        household = create_household(db_session, isibo=hierarchy.isibo)
        db_session.commit()

        response = client.put(
            f"/api/village/pending-approvals/{household.id}/approve",
            headers=auth_headers(hierarchy.cell_leader),
        )

        assert response.status_code == 403
        assert response.json() == {
            "message": "Access denied. Only village_leader allowed.",
            "code": "role_denied",
        }

    def test_admin_is_not_a_reviewer(self, client, db_session, auth_headers):
        admin = create_user(db_session, role=UserRole.ADMIN)
        db_session.commit()

        response = client.get("/api/sector/pending-approvals", headers=auth_headers(admin))
        assert response.status_code == 403

    def test_missing_token(self, client):
        response = client.get("/api/village/pending-approvals")

        assert response.status_code == 401
        assert response.json() == {"message": "Could not validate credentials", "code": "http_error"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token(self, client):
        response = client.get(
            "/api/village/pending-approvals",
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert response.status_code == 401

    def test_token_after_role_change(self, client, db_session, hierarchy, auth_headers):
        headers = auth_headers(hierarchy.village_leader)
        hierarchy.village_leader.role = UserRole.CELL_LEADER.value
        db_session.commit()

        response = client.get("/api/village/pending-approvals", headers=headers)
        assert response.status_code == 401

    def test_inactive_user(self, client, db_session, hierarchy, auth_headers):
        headers = auth_headers(hierarchy.village_leader)
        hierarchy.village_leader.is_active = False
        db_session.commit()

        response = client.get("/api/village/pending-approvals", headers=headers)
        assert response.status_code == 401
