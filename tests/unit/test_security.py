"""Tests for password hashing and access tokens."""

from datetime import timedelta
from uuid import uuid4

from jose import jwt

from umuturage.core.config import get_settings
from umuturage.core.rbac.roles import UserRole
from umuturage.core.security import (
    create_access_token,
    decode_token,
    get_password_hash,
    verify_password,
)


class TestPasswordHashing:

    def test_hash_and_verify(self):
        hashed = get_password_hash("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong-pass", hashed)


class TestAccessTokens:

    def test_round_trip(self):
        user_id = uuid4()
        token = create_access_token(user_id, UserRole.CELL_LEADER)
        assert decode_token(token) == (user_id, UserRole.CELL_LEADER)

    def test_expired_token(self):
        token = create_access_token(uuid4(), UserRole.ADMIN, expires_delta=timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_garbage_token(self):
        assert decode_token("not-a-token") is None

    def test_wrong_signature(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": str(uuid4()), "role": "admin", "type": "access"},
            "another-key",
            algorithm=settings.algorithm,
        )
        assert decode_token(token) is None

    def test_unknown_role(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": str(uuid4()), "role": "mayor", "type": "access"},
            settings.secret_key,
            algorithm=settings.algorithm,
        )
        assert decode_token(token) is None

    def test_non_access_token(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": str(uuid4()), "role": "admin", "type": "refresh"},
            settings.secret_key,
            algorithm=settings.algorithm,
        )
        assert decode_token(token) is None
