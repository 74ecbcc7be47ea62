"""
CLI entrypoint for deleting expired server-side sessions. Run from cron, e.g.:

  python -m linkshare.scripts.purge_sessions

Or hourly: 0 * * * * cd /path/to/linkshare && .venv/bin/python -m linkshare.scripts.purge_sessions
"""

import logging
import sys

from linkshare.core.config import get_settings
from linkshare.core.database import build_engine, build_session_factory
from linkshare.core.logging_config import configure_logging
from linkshare.services.identity import SessionIdentityProvider

logger = logging.getLogger(__name__)


def main() -> int:
    """Delete auth_sessions rows whose expires_at has passed."""
    settings = get_settings()
    configure_logging(settings)
    if settings.AUTH_MODE != "session":
        logger.info("AUTH_MODE=%s has no server-side sessions; skipping.", settings.AUTH_MODE)
        return 0
    engine = build_engine(settings)
    db = build_session_factory(engine)()
    try:
        deleted = SessionIdentityProvider(settings).purge_expired(db)
        logger.info("Session purge completed: sessions_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Session purge failed: %s", e)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
