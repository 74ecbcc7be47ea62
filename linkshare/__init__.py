"""Linkshare: share web links with token- or session-based authentication."""

__version__ = "0.1.0"
