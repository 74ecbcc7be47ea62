"""SQLAlchemy ORM models."""

from linkshare.models.article import Article
from linkshare.models.auth_session import AuthSession
from linkshare.models.base import Base
from linkshare.models.user import User

__all__ = ["Article", "AuthSession", "Base", "User"]
