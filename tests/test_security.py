"""
Tests for the session guard and password hashing.
"""

from __future__ import annotations

import pytest

from shop_erp.core.security import (
    SessionGuard,
    SessionState,
    decode_identity,
    encode_identity,
    get_password_hash,
    verify_password,
)
from shop_erp.schemas.auth import Identity

IDENTITY = Identity(username="admin", name="Admin User", role="Administrator")


@pytest.fixture(autouse=True)
def secret(monkeypatch):
    monkeypatch.setenv("SESSION_SECRET_KEY", "unit-secret")


class TestSessionGuard:
    def test_starts_loading(self):
        assert SessionGuard().state is SessionState.LOADING

    def test_restore_without_token(self):
        guard = SessionGuard()
        assert guard.restore(None) is SessionState.UNAUTHENTICATED
        assert guard.identity is None

    def test_login_then_restore_round_trip(self):
        token = SessionGuard().login(IDENTITY)
        guard = SessionGuard()
        assert guard.restore(token) is SessionState.AUTHENTICATED
        assert guard.identity == IDENTITY

    def test_tampered_token_is_unauthenticated(self):
        token = encode_identity(IDENTITY)
        guard = SessionGuard()
        assert guard.restore(token[:-2] + "xx") is SessionState.UNAUTHENTICATED
        assert guard.restore("not-a-token") is SessionState.UNAUTHENTICATED

    def test_token_signed_with_other_secret(self, monkeypatch):
        token = encode_identity(IDENTITY)
        monkeypatch.setenv("SESSION_SECRET_KEY", "other-secret")
        assert SessionGuard().restore(token) is SessionState.UNAUTHENTICATED

    def test_logout_clears_identity(self):
        guard = SessionGuard()
        guard.login(IDENTITY)
        guard.logout()
        assert guard.state is SessionState.UNAUTHENTICATED
        assert guard.identity is None
        assert not guard.is_authenticated

    def test_decode_identity(self):
        assert decode_identity(encode_identity(IDENTITY)).name == "Admin User"


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = get_password_hash("s3cret")
        assert hashed != "s3cret"
        assert verify_password("s3cret", hashed)
        assert not verify_password("wrong", hashed)
