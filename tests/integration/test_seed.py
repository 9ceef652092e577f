"""Tests for admin seeding."""

import pytest

from umuturage.core.rbac.roles import UserRole
from umuturage.core.security import verify_password
from umuturage.db.models import User
from umuturage.db.seed import seed_admin
from tests.factories import create_user


pytestmark = [pytest.mark.db, pytest.mark.integration]


class TestSeedAdmin:

    def test_creates_admin(self, db_session):
        admin = seed_admin(db_session, "Super Admin", "admin@example.com", "Admin@123")

        assert admin.role == UserRole.ADMIN.value
        assert verify_password("Admin@123", admin.password_hash)
        assert db_session.query(User).filter(User.role == UserRole.ADMIN.value).one().id == admin.id

    def test_idempotent(self, db_session):
        first = seed_admin(db_session, "Super Admin", "admin@example.com", "Admin@123")
        second = seed_admin(db_session, "Someone Else", "admin@example.com", "other-pass")

        assert first.id == second.id
        assert db_session.query(User).count() == 1
        assert verify_password("Admin@123", second.password_hash)

    def test_existing_non_admin_is_left_alone(self, db_session):
        leader = create_user(db_session, role=UserRole.CELL_LEADER, email="admin@example.com")

        result = seed_admin(db_session, "Super Admin", "admin@example.com", "Admin@123")

        assert result.id == leader.id
        assert result.role == UserRole.CELL_LEADER.value
        assert db_session.query(User).filter(User.role == UserRole.ADMIN.value).count() == 0
