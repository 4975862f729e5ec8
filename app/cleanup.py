"""
CLI entrypoint for removing expired login sessions. Run from cron, e.g.:

  python -m app.cleanup

Or hourly: 0 * * * * cd /path/to/service-panel && .venv/bin/python -m app.cleanup
"""

import logging
import sys

from app.core.database import SessionLocal
from app.core.sessions import delete_expired_sessions

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
        deleted = delete_expired_sessions(db)
        logger.info("Session cleanup completed: sessions_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Session cleanup failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
