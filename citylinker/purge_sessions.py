"""
CLI entrypoint for the expired-session purge. Run from cron, e.g.:

  python -m citylinker.purge_sessions

Or hourly: 0 * * * * cd /path/to/citylinker && .venv/bin/python -m citylinker.purge_sessions
"""

import logging
import sys

from citylinker.core.config import get_settings
from citylinker.core.database import SessionLocal
from citylinker.services.sessions import SessionStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Delete sessions whose expiry has passed."""
    db = SessionLocal()
    try:
        deleted = SessionStore.from_settings(db, get_settings()).purge_expired()
        logger.info("Session purge completed: sessions_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Session purge failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
