"""Upload store maintenance."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from course_portal import config
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.course_manager import CourseManager
from course_portal.utils.file_store import FileStore
from course_portal.utils.notice_manager import NoticeManager

logger = logging.getLogger(__name__)


def cleanup_orphaned_files(
    db: Session,
    actor: Optional[str] = None,
    audit: Optional[AuditLogManager] = None,
    file_store: Optional[FileStore] = None,
) -> List[str]:
    """Delete stored materials and notice documents no record references.

    Returns:
        Store-relative paths of the removed files.
    """
    audit = audit or AuditLogManager(db)
    file_store = file_store or FileStore()
    referenced = CourseManager(db, audit, file_store).referenced_paths()
    referenced += NoticeManager(db, audit, file_store).referenced_paths()

    removed = file_store.remove_orphans(
        [config.MATERIALS_DIR_NAME, config.NOTICES_DIR_NAME], referenced
    )
    audit.append(
        "SYSTEM_CLEANUP", actor, f"Removed {len(removed)} orphaned files"
    )
    return removed
