"""Core app configuration, database wiring, security primitives and errors."""

from linkshare.core.config import Settings, get_settings
from linkshare.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]
