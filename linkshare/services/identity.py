"""
Identity issuing and resolution.

One provider is active per deployment (settings.AUTH_MODE):

* TokenIdentityProvider: stateless signed JWT carried in `Authorization: Bearer`.
  Cannot be revoked before it expires; logout is client-side.
* SessionIdentityProvider: random reference carried in an http-only cookie; the
  claim set lives in the auth_sessions table and deleting the row revokes it.

resolve() maps every failure (malformed, bad signature, unknown, expired) to the
same AuthenticationError so callers cannot tell which one happened.
"""

import hashlib
import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from linkshare.core.config import Settings
from linkshare.core.errors import INVALID_CREDENTIALS_MESSAGE, AuthenticationError
from linkshare.core.security import create_access_token, decode_access_token
from linkshare.models.auth_session import AuthSession
from linkshare.models.user import User
from linkshare.schemas.auth import Principal

logger = logging.getLogger(__name__)

SESSION_REFERENCE_BYTES = 32


class AssertionRejected(Exception):
    """Internal reason an assertion was refused; never shown to the client."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


@dataclass(frozen=True)
class IssuedAssertion:
    """What a successful login hands back: the raw assertion and who it identifies."""

    value: str
    expires_at: datetime
    principal: Principal


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on DateTime(timezone=True) columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def hash_session_reference(reference: str) -> str:
    return hashlib.sha256(reference.encode("utf-8")).hexdigest()


def invalid_credentials(headers: dict[str, str] | None = None) -> AuthenticationError:
    return AuthenticationError(INVALID_CREDENTIALS_MESSAGE, headers=headers)


class IdentityProvider(ABC):
    """Issues, resolves and revokes identity assertions."""

    mode: str
    token_type: str

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @abstractmethod
    def issue(self, db: Session, user: User, now: datetime | None = None) -> IssuedAssertion:
        """Create an assertion for a verified user."""

    @abstractmethod
    def verify(self, db: Session, raw: str, now: datetime | None = None) -> Principal:
        """Return the principal for a raw assertion or raise AssertionRejected."""

    @abstractmethod
    def revoke(self, db: Session, raw: str) -> bool:
        """Invalidate the assertion server-side. Returns True when something was revoked."""

    @property
    def auth_headers(self) -> dict[str, str] | None:
        """Headers attached to 401 responses."""
        return None

    def resolve(self, db: Session, raw: str, now: datetime | None = None) -> Principal:
        """Validate a raw assertion; every failure becomes the same AuthenticationError."""
        try:
            return self.verify(db, raw, now=now)
        except AssertionRejected as e:
            logger.info("Assertion rejected: mode=%s reason=%s", self.mode, e.reason)
            raise invalid_credentials(self.auth_headers) from None


class TokenIdentityProvider(IdentityProvider):
    mode = "token"
    token_type = "bearer"

    @property
    def auth_headers(self) -> dict[str, str] | None:
        return {"WWW-Authenticate": "Bearer"}

    def issue(self, db: Session, user: User, now: datetime | None = None) -> IssuedAssertion:
        token, expires_at = create_access_token(
            self.settings, user.id, user.username, user.role, now=now
        )
        principal = Principal(id=user.id, username=user.username, role=user.role)
        return IssuedAssertion(value=token, expires_at=expires_at, principal=principal)

    def verify(self, db: Session, raw: str, now: datetime | None = None) -> Principal:
        try:
            payload = decode_access_token(self.settings, raw)
        except jwt.ExpiredSignatureError:
            raise AssertionRejected("expired") from None
        except jwt.PyJWTError:
            raise AssertionRejected("malformed") from None
        # PyJWT checks exp against the wall clock; an explicit `now` lets tests pin time.
        if now is not None and payload["exp"] <= now.timestamp():
            raise AssertionRejected("expired")
        try:
            return Principal(
                id=int(payload["sub"]),
                username=payload["username"],
                role=payload["role"],
            )
        except (TypeError, ValueError, PydanticValidationError):
            raise AssertionRejected("bad_claims") from None

    def revoke(self, db: Session, raw: str) -> bool:
        return False


class SessionIdentityProvider(IdentityProvider):
    mode = "session"
    token_type = "session"

    def issue(self, db: Session, user: User, now: datetime | None = None) -> IssuedAssertion:
        created = now or datetime.now(UTC)
        expires_at = created + timedelta(hours=self.settings.SESSION_EXPIRE_HOURS)
        reference = secrets.token_urlsafe(SESSION_REFERENCE_BYTES)
        row = AuthSession(
            token_hash=hash_session_reference(reference),
            user_id=user.id,
            username=user.username,
            role=user.role,
            created_at=created,
            expires_at=expires_at,
        )
        db.add(row)
        db.commit()
        principal = Principal(id=user.id, username=user.username, role=user.role)
        return IssuedAssertion(value=reference, expires_at=expires_at, principal=principal)

    def verify(self, db: Session, raw: str, now: datetime | None = None) -> Principal:
        if not raw or len(raw) > 256:
            raise AssertionRejected("malformed")
        row = (
            db.query(AuthSession)
            .filter(AuthSession.token_hash == hash_session_reference(raw))
            .first()
        )
        if row is None:
            raise AssertionRejected("unknown_session")
        current = now or datetime.now(UTC)
        if _as_utc(row.expires_at) <= current:
            db.delete(row)
            db.commit()
            raise AssertionRejected("expired")
        try:
            return Principal(id=row.user_id, username=row.username, role=row.role)
        except PydanticValidationError:
            raise AssertionRejected("bad_claims") from None

    def revoke(self, db: Session, raw: str) -> bool:
        deleted = (
            db.query(AuthSession)
            .filter(AuthSession.token_hash == hash_session_reference(raw))
            .delete(synchronize_session=False)
        )
        db.commit()
        if deleted:
            logger.info("Session revoked")
        return bool(deleted)

    def purge_expired(self, db: Session, now: datetime | None = None) -> int:
        """Delete sessions past their expiry. Safe to run repeatedly."""
        cutoff = now or datetime.now(UTC)
        deleted = (
            db.query(AuthSession)
            .filter(AuthSession.expires_at <= cutoff)
            .delete(synchronize_session=False)
        )
        db.commit()
        if deleted:
            logger.info("Expired sessions purged: count=%s", deleted)
        return deleted


def build_identity_provider(settings: Settings) -> IdentityProvider:
    if settings.AUTH_MODE == "session":
        return SessionIdentityProvider(settings)
    return TokenIdentityProvider(settings)
