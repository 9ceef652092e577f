"""Tests for roles, tiers and the role-checking decorator."""

import asyncio
from types import SimpleNamespace

import pytest

from umuturage.core.errors import RoleDenied
from umuturage.core.rbac import (
    PARENT_TIERS,
    Tier,
    UserRole,
    has_role,
    require_role,
    role_for_tier,
)


class TestRoles:

    def test_every_tier_has_a_leader_role(self):
        assert role_for_tier(Tier.SECTOR) == UserRole.SECTOR_LEADER
        assert role_for_tier(Tier.CELL) == UserRole.CELL_LEADER
        assert role_for_tier(Tier.VILLAGE) == UserRole.VILLAGE_LEADER
        assert role_for_tier(Tier.ISIBO) == UserRole.ISIBO_LEADER

    def test_parent_tiers_form_a_chain(self):
        assert PARENT_TIERS[Tier.SECTOR] is None
        assert PARENT_TIERS[Tier.CELL] == Tier.SECTOR
        assert PARENT_TIERS[Tier.VILLAGE] == Tier.CELL
        assert PARENT_TIERS[Tier.ISIBO] == Tier.VILLAGE


class TestHasRole:

    def test_matching_role(self):
        user = SimpleNamespace(role="cell_leader")
        assert has_role(user, UserRole.CELL_LEADER)
        assert has_role(user, "sector_leader", "cell_leader")

    def test_other_role(self):
        user = SimpleNamespace(role="village_leader")
        assert not has_role(user, UserRole.CELL_LEADER)

    def test_admin_is_not_a_reviewer(self):
        admin = SimpleNamespace(role="admin")
        assert not has_role(admin, UserRole.VILLAGE_LEADER, UserRole.CELL_LEADER, UserRole.SECTOR_LEADER)

    def test_missing_user(self):
        assert not has_role(None, UserRole.ADMIN)


class TestRequireRole:

    def test_allows_matching_role(self):
        @require_role(UserRole.SECTOR_LEADER)
        async def endpoint(current_user=None):
            return "ok"

        user = SimpleNamespace(role="sector_leader")
        assert asyncio.run(endpoint(current_user=user)) == "ok"

    def test_denies_other_role(self):
        @require_role(UserRole.SECTOR_LEADER)
        async def endpoint(current_user=None):
            return "ok"

        user = SimpleNamespace(role="cell_leader")
        with pytest.raises(RoleDenied) as exc_info:
            asyncio.run(endpoint(current_user=user))
        assert exc_info.value.message == "Access denied. Only sector_leader allowed."
        assert exc_info.value.status_code == 403

    def test_preserves_endpoint_metadata(self):
        @require_role(UserRole.ADMIN)
        async def list_units(current_user=None):
            """List units."""

        assert list_units.__name__ == "list_units"
        assert list_units.__doc__ == "List units."
