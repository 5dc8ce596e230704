"""Helpers shared by the record managers: id generation and commits."""

import logging
import secrets
import time
from datetime import datetime

import pytz
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from course_portal.core.exceptions import ConflictError, StoreFailureError

logger = logging.getLogger(__name__)


def generate_id(prefix: str) -> str:
    """Build a ``<prefix>-<epoch-ms>-<random>`` identifier.

    Unique enough for human-scale record creation; not a security token.
    """
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def utc_now_iso() -> str:
    return datetime.now(pytz.utc).isoformat()


def commit(db: Session, action: str) -> None:
    """Commit the session, translating store errors.

    Args:
        db: Session holding the pending change.
        action: Short description used in log and error messages.

    Raises:
        ConflictError: If a versioned row changed since it was loaded.
        StoreFailureError: If the store rejected the write.
    """
    try:
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning("Concurrent modification during %s: %s", action, e)
        raise ConflictError(
            f"Failed to {action}: the record was modified concurrently."
        ) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Store failure during %s: %s", action, e, exc_info=True)
        raise StoreFailureError(f"Failed to {action}") from e
