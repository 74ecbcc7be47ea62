"""Password hashing and JWT encoding/decoding for authentication."""

import base64
import hashlib
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from linkshare.core.config import Settings

# Claims every access token must carry; jwt.decode rejects tokens missing any of them.
REQUIRED_CLAIMS = ["sub", "username", "role", "iat", "exp"]


def _bcrypt_input(plain_password: str) -> bytes:
    """
    bcrypt ignores everything past 72 bytes, so feed it the base64 SHA-256 of the
    password instead (44 bytes, no NUL). Every character of the password counts.
    """
    digest = hashlib.sha256(plain_password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(plain_password: str, rounds: int = 12) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    return bcrypt.hashpw(_bcrypt_input(plain_password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    try:
        return bcrypt.checkpw(_bcrypt_input(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache
def _dummy_hash(rounds: int) -> bytes:
    return bcrypt.hashpw(b"linkshare-timing-equalizer", bcrypt.gensalt(rounds=rounds))


def prime_dummy_hash(rounds: int) -> None:
    """Build the dummy hash up front so the first unknown-user login is not slower."""
    _dummy_hash(rounds)


def verify_against_dummy(plain_password: str, rounds: int = 12) -> bool:
    """
    Spend one bcrypt check at the configured cost on a fixed hash, so an unknown
    username takes as long as a wrong password. Always returns False.
    """
    bcrypt.checkpw(_bcrypt_input(plain_password), _dummy_hash(rounds))
    return False


def create_access_token(
    settings: Settings,
    user_id: int,
    username: str,
    role: str,
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """Create a signed JWT carrying id, username and role. Returns (token, expires_at)."""
    issued = now or datetime.now(UTC)
    expire = issued + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "iat": issued,
        "exp": expire,
    }
    token = jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )
    return token, expire


def decode_access_token(settings: Settings, token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, username, role, iat, exp).
    Raises jwt.ExpiredSignatureError when expired and jwt.PyJWTError on any other problem.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": REQUIRED_CLAIMS},
    )
