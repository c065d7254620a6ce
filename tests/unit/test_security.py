"""Tests for password hashing and access tokens."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest
from fastapi import Response

from catalog.config import settings
from catalog.core.security import (
    SESSION_COOKIE,
    create_access_token,
    hash_password,
    pick_session_token,
    set_session_cookie,
    validate_password_strength,
    verify_access_token,
    verify_password,
)


@pytest.mark.unit
class TestPasswordStrength:
    def test_accepts_strong_password(self):
        assert validate_password_strength("Figures2025") == (True, None)

    @pytest.mark.parametrize(
        ("password", "fragment"),
        [
            ("Ab1", "8 characters"),
            ("figures2025", "uppercase"),
            ("FIGURES2025", "lowercase"),
            ("FiguresOnly", "digit"),
        ],
    )
    def test_rejects_weak_passwords(self, password, fragment):
        is_valid, message = validate_password_strength(password)
        assert not is_valid
        assert fragment in message


@pytest.mark.unit
class TestPasswordHashing:
    def test_hash_round_trip(self):
        hashed = hash_password("Figures2025")
        assert hashed != "Figures2025"
        assert verify_password("Figures2025", hashed)
        assert not verify_password("figures2025", hashed)

    def test_non_bcrypt_value_does_not_verify(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_long_passwords_differ_past_72_bytes(self):
        base = "Aa1" + "x" * 80
        hashed = hash_password(base + "one")
        assert verify_password(base + "one", hashed)
        assert not verify_password(base + "two", hashed)


@pytest.mark.unit
class TestAccessTokens:
    def test_token_carries_only_user_id(self):
        token = create_access_token(42)
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert payload["sub"] == "42"
        assert payload["type"] == "access"
        assert "role" not in payload
        assert verify_access_token(token) == 42

    def test_expired_token_is_rejected(self):
        token = create_access_token(42, expires_delta=timedelta(seconds=-1))
        assert verify_access_token(token) is None

    def test_wrong_signature_is_rejected(self):
        token = jwt.encode(
            {"sub": "42", "type": "access", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            "another-secret",
            algorithm=settings.ALGORITHM,
        )
        assert verify_access_token(token) is None

    def test_wrong_type_is_rejected(self):
        token = jwt.encode(
            {"sub": "42", "type": "refresh", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )
        assert verify_access_token(token) is None

    def test_garbage_is_rejected(self):
        assert verify_access_token("not.a.token") is None

    def test_non_numeric_subject_is_rejected(self):
        token = jwt.encode(
            {"sub": "admin", "type": "access", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )
        assert verify_access_token(token) is None

    def test_missing_expiry_is_rejected(self):
        token = jwt.encode({"sub": "42", "type": "access"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        assert verify_access_token(token) is None


@pytest.mark.unit
class TestSessionTransport:
    def test_bearer_wins_over_cookie(self):
        assert pick_session_token("header-token", "cookie-token") == "header-token"

    def test_cookie_used_without_bearer(self):
        assert pick_session_token(None, "cookie-token") == "cookie-token"

    def test_nothing_sent(self):
        assert pick_session_token(None, None) is None
        assert pick_session_token("", "") is None

    def test_cookie_is_http_only_and_expires_with_token(self):
        response = Response()
        set_session_cookie(response, "signed-token")

        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"{SESSION_COOKIE}=signed-token")
        assert "HttpOnly" in cookie
        assert f"Max-Age={settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60}" in cookie
        assert "samesite=strict" in cookie.lower()
