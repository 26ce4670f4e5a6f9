"""bcrypt password hashes and the signed session token carried in the auth cookie."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from labeldesk.core.config import settings

BCRYPT_ROUNDS = 12

# bcrypt ignores everything past 72 bytes and newer releases raise instead.
_BCRYPT_MAX_BYTES = 72

# users.login is VARCHAR(255).
LOGIN_MAX_LEN = 255

_REQUIRED_CLAIMS = ["sub", "role", "exp", "iat"]


def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain_password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("ascii")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """False for a wrong password and for a stored value that is not a bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), password_hash.encode("ascii"))
    except (ValueError, TypeError, UnicodeEncodeError):
        return False


def session_lifetime() -> timedelta:
    return timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def cookie_max_age_seconds() -> int:
    return int(session_lifetime().total_seconds())


def create_session_token(user_id: int, role: str) -> str:
    """HS256 JWT with sub (user id as a string), role, iat and exp."""
    issued_at = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "role": role,
        "iat": issued_at,
        "exp": issued_at + session_lifetime(),
    }
    return jwt.encode(claims, settings.JWT_SECRET.get_secret_value(), algorithm=settings.JWT_ALGORITHM)


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises jwt.PyJWTError when the token is malformed, forged, expired or
    missing one of the session claims.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": _REQUIRED_CLAIMS},
    )


def session_user_id(token: str) -> int:
    """User id from a valid session token. Raises jwt.InvalidTokenError for a non-numeric sub."""
    sub = decode_session_token(token)["sub"]
    try:
        return int(sub)
    except (TypeError, ValueError) as e:
        raise jwt.InvalidTokenError("sub is not a user id") from e
