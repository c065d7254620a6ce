"""
Credentials for catalog accounts.

A password is stored as a bcrypt hash. A session is a signed JWT whose subject
is the user id and nothing more; the resolver in ``catalog.core.auth`` loads
the role from the database on every request, so a role change applies at once.

The same token travels two ways: API clients send it as a bearer header,
browsers get it back in the ``access_token`` cookie set at login. When both are
present the header wins.
"""

import base64
import hashlib
import re
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
from fastapi import Response

from catalog.config import settings

SESSION_COOKIE = "access_token"
TOKEN_TYPE = "access"

MIN_PASSWORD_LENGTH = 8
BCRYPT_ROUNDS = 12
BCRYPT_MAX_BYTES = 72

PASSWORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"\d"), "Password must contain at least one digit"),
)


# ===== Passwords =====


def validate_password_strength(password: str) -> tuple[bool, str | None]:
    """Check a new password; returns (ok, first failing rule's message)."""
    if len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    for pattern, message in PASSWORD_RULES:
        if pattern.search(password) is None:
            return False, message
    return True, None


def _bcrypt_input(password: str) -> bytes:
    # bcrypt ignores bytes past 72; longer passwords are pre-hashed
    raw = password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES:
        raw = base64.b64encode(hashlib.sha256(raw).digest())
    return raw


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_bcrypt_input(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("ascii")


def verify_password(password: str, stored_hash: str) -> bool:
    """False for a wrong password and for a stored value that is not a bcrypt hash."""
    try:
        return bcrypt.checkpw(_bcrypt_input(password), stored_hash.encode("utf-8"))
    except ValueError:
        return False


# ===== Session tokens =====


def session_lifetime() -> timedelta:
    return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Sign a session token for ``user_id``."""
    lifetime = session_lifetime() if expires_delta is None else expires_delta
    claims = {
        "sub": str(user_id),
        "type": TOKEN_TYPE,
        "exp": datetime.now(UTC) + lifetime,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _user_id_from_subject(subject: object) -> int | None:
    if isinstance(subject, str) and subject.isdigit():
        return int(subject)
    return None


def verify_access_token(token: str) -> int | None:
    """
    User id carried by a valid session token.

    Returns None for a bad signature, an expired token, a token of another
    type, or a subject that is not a user id.
    """
    try:
        claims = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.InvalidTokenError:
        return None
    if claims.get("type") != TOKEN_TYPE:
        return None
    return _user_id_from_subject(claims.get("sub"))


def pick_session_token(bearer: str | None, cookie: str | None) -> str | None:
    """The credential to resolve: bearer header first, then the cookie."""
    return bearer or cookie or None


def set_session_cookie(response: Response, token: str) -> None:
    """
    Hand the session token to a browser.

    The cookie is HTTP-only and expires together with the token.
    """
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=settings.ENVIRONMENT == "production",
        samesite="strict",
        max_age=int(session_lifetime().total_seconds()),
    )
