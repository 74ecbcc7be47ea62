"""Registration, login and logout built on the credential store and identity provider."""

import logging

from sqlalchemy.orm import Session

from linkshare.core.config import Settings
from linkshare.core.errors import ConflictError, InvalidCredentialsError, ValidationError
from linkshare.core.security import hash_password, verify_against_dummy, verify_password
from linkshare.models.user import User
from linkshare.services.credentials import UsernameTakenError, create_user, get_user_by_username
from linkshare.services.identity import IdentityProvider, IssuedAssertion

logger = logging.getLogger(__name__)


def _validate_credentials(settings: Settings, username: str, password: str) -> str:
    username = username.strip()
    if not username or not password:
        raise ValidationError("Username and password are required.")
    if not (settings.USERNAME_MIN_LEN <= len(username) <= settings.USERNAME_MAX_LEN):
        raise ValidationError(
            f"Username must be {settings.USERNAME_MIN_LEN}-{settings.USERNAME_MAX_LEN} characters."
        )
    if not (settings.PASSWORD_MIN_LEN <= len(password) <= settings.PASSWORD_MAX_LEN):
        raise ValidationError(
            f"Password must be {settings.PASSWORD_MIN_LEN}-{settings.PASSWORD_MAX_LEN} characters."
        )
    return username


def register(db: Session, settings: Settings, username: str, password: str) -> User:
    """Create a user with role 'user'. Raises ValidationError or ConflictError."""
    username = _validate_credentials(settings, username, password)
    password_hash = hash_password(password, settings.BCRYPT_ROUNDS)
    try:
        user = create_user(db, username, password_hash)
    except UsernameTakenError:
        logger.info("Registration rejected: username taken")
        raise ConflictError(
            "Username already exists.", status_code=settings.CONFLICT_STATUS_CODE
        ) from None
    logger.info("User registered: user_id=%s", user.id)
    return user


def authenticate(db: Session, username: str, password: str, rounds: int = 12) -> User | None:
    """
    Return the user when username and password match, else None.
    Unknown usernames still pay for one bcrypt check.
    """
    user = get_user_by_username(db, username.strip())
    if user is None:
        verify_against_dummy(password, rounds)
        logger.info("Login failed: reason=unknown_user")
        return None
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: reason=bad_password user_id=%s", user.id)
        return None
    return user


def login(
    db: Session,
    provider: IdentityProvider,
    username: str,
    password: str,
) -> IssuedAssertion:
    """Verify credentials and issue an assertion. Raises InvalidCredentialsError on any mismatch."""
    if not username or not password:
        raise ValidationError("Username and password are required.")
    user = authenticate(db, username, password, provider.settings.BCRYPT_ROUNDS)
    if user is None:
        raise InvalidCredentialsError(headers=provider.auth_headers)
    issued = provider.issue(db, user)
    logger.info("Login succeeded: user_id=%s mode=%s", user.id, provider.mode)
    return issued


def logout(db: Session, provider: IdentityProvider, raw_assertion: str | None) -> bool:
    """Revoke the assertion server-side where the mode allows it."""
    if not raw_assertion:
        return False
    return provider.revoke(db, raw_assertion)
