"""Credential store: user lookup and atomic insert-if-absent registration."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from linkshare.core.security import hash_password
from linkshare.models.user import ROLE_ADMIN, ROLE_USER, User

logger = logging.getLogger(__name__)


class UsernameTakenError(Exception):
    """Raised when the username already exists (unique index violation)."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username already exists: {username}")


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def create_user(
    db: Session,
    username: str,
    password_hash: str,
    role: str = ROLE_USER,
) -> User:
    """
    Insert a user in one statement. The unique index on username decides races;
    the losing insert is rolled back and reported as UsernameTakenError.
    """
    user = User(username=username, password_hash=password_hash, role=role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise UsernameTakenError(username) from e
    db.refresh(user)
    return user


def ensure_admin(db: Session, username: str, password: str, rounds: int) -> User | None:
    """Create the bootstrap admin if missing. Returns the new user, or None if it already existed."""
    if get_user_by_username(db, username) is not None:
        return None
    try:
        user = create_user(db, username, hash_password(password, rounds), role=ROLE_ADMIN)
    except UsernameTakenError:
        # Another worker seeded it first.
        return None
    logger.info("Admin account created: username=%s", username)
    return user
