"""Audit log writer.

Every successful mutating operation appends one entry. The log keeps only the
most recent ``AUDIT_LOG_LIMIT`` entries and is read newest first.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from course_portal import config
from course_portal.core.exceptions import NotFoundError, ValidationError
from course_portal.models.audit_log import AuditLogModel
from course_portal.utils.store import commit, generate_id, utc_now_iso

logger = logging.getLogger(__name__)


class AuditLogManager:
    """Manages the audit log collection."""

    def __init__(self, db: Session, limit: Optional[int] = None):
        """Initialize AuditLogManager.

        Args:
            db: SQLAlchemy Session.
            limit: Retention cap; defaults to ``config.AUDIT_LOG_LIMIT``.
        """
        self.db = db
        self.limit = limit if limit is not None else config.AUDIT_LOG_LIMIT

    def append(self, action: str, username: Optional[str], details: str) -> None:
        """Record one action. Never raises.

        Callers append after committing their own change, so a failure here
        only loses the log entry.

        Args:
            action: Action verb, e.g. "DELETE_FILE".
            username: Actor; "Unknown" when not known.
            details: Human-readable summary.
        """
        try:
            entry = AuditLogModel(
                id=generate_id("log"),
                date=utc_now_iso(),
                action=action,
                username=username or "Unknown",
                details=details,
            )
            self.db.add(entry)
            self.db.flush()
            self._trim()
            self.db.commit()
            logger.info("[AUDIT] %s by %s", action, entry.username)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Audit log write failed for %s: %s", action, e, exc_info=True)

    def _trim(self) -> None:
        cutoff = (
            self.db.query(AuditLogModel.seq)
            .order_by(AuditLogModel.seq.desc())
            .offset(self.limit)
            .first()
        )
        if cutoff is not None:
            self.db.query(AuditLogModel).filter(
                AuditLogModel.seq <= cutoff.seq
            ).delete(synchronize_session=False)

    def list_logs(self) -> List[AuditLogModel]:
        """All retained entries, newest first."""
        return self.db.query(AuditLogModel).order_by(AuditLogModel.seq.desc()).all()

    def delete_log(self, log_id: str) -> None:
        """Delete one entry.

        Raises:
            NotFoundError: If no entry has this id.
        """
        entry = self.db.query(AuditLogModel).filter(AuditLogModel.id == log_id).first()
        if entry is None:
            raise NotFoundError("Log", log_id)
        self.db.delete(entry)
        commit(self.db, "delete log")
        logger.info("Deleted audit log: %s", log_id)

    def batch_delete(self, ids: Any) -> int:
        """Delete every entry whose id is listed; unknown ids are ignored.

        Returns:
            Number of entries removed.

        Raises:
            ValidationError: If ``ids`` is not a list.
        """
        if not isinstance(ids, list):
            raise ValidationError("Invalid IDs format: expected a list of log ids.")
        if not ids:
            return 0
        deleted = (
            self.db.query(AuditLogModel)
            .filter(AuditLogModel.id.in_([str(i) for i in ids]))
            .delete(synchronize_session=False)
        )
        commit(self.db, "batch delete logs")
        logger.info("Batch deleted %d audit logs", deleted)
        return deleted

    def clear_logs(self, username: Optional[str]) -> int:
        """Remove every entry, then record the clear itself.

        Returns:
            Number of entries removed.
        """
        deleted = self.db.query(AuditLogModel).delete(synchronize_session=False)
        commit(self.db, "clear logs")
        self.append("CLEAR_LOGS", username, "Cleared all activity logs")
        return deleted
