"""Dependency injection module for FastAPI.

Each manager is constructed per request around the request-scoped DB session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from course_portal.core.database import get_db
from course_portal.utils import audit_logger
from course_portal.utils import course_manager
from course_portal.utils import deletion_request_manager
from course_portal.utils import feedback_manager
from course_portal.utils import holiday_manager
from course_portal.utils import notice_manager
from course_portal.utils import schedule_manager
from course_portal.utils import settings_manager
from course_portal.utils import syllabus_manager
from course_portal.utils import user_manager
from course_portal.utils.file_store import FileStore


def get_file_store() -> FileStore:
    """Get the upload store rooted at the configured uploads directory."""
    return FileStore()


def get_audit_log_manager(
    db: Session = Depends(get_db),
) -> audit_logger.AuditLogManager:
    """Get AuditLogManager instance with request-scoped DB session."""
    return audit_logger.AuditLogManager(db)


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_course_manager(
    db: Session = Depends(get_db),
    file_store: FileStore = Depends(get_file_store),
) -> course_manager.CourseManager:
    """Get CourseManager instance with request-scoped DB session.

    Args:
        db: Database session.
        file_store: Store holding uploaded course materials.

    Returns:
        CourseManager instance.
    """
    return course_manager.CourseManager(db, file_store=file_store)


def get_schedule_manager(
    db: Session = Depends(get_db),
    file_store: FileStore = Depends(get_file_store),
) -> schedule_manager.ScheduleManager:
    """Get ScheduleManager instance with request-scoped DB session."""
    return schedule_manager.ScheduleManager(db, file_store=file_store)


def get_syllabus_manager(
    db: Session = Depends(get_db),
    file_store: FileStore = Depends(get_file_store),
) -> syllabus_manager.SyllabusManager:
    """Get SyllabusManager instance with request-scoped DB session."""
    return syllabus_manager.SyllabusManager(db, file_store=file_store)


def get_notice_manager(
    db: Session = Depends(get_db),
    file_store: FileStore = Depends(get_file_store),
) -> notice_manager.NoticeManager:
    """Get NoticeManager instance with request-scoped DB session."""
    return notice_manager.NoticeManager(db, file_store=file_store)


def get_holiday_manager(
    db: Session = Depends(get_db),
) -> holiday_manager.HolidayManager:
    return holiday_manager.HolidayManager(db)


def get_feedback_manager(
    db: Session = Depends(get_db),
) -> feedback_manager.FeedbackManager:
    return feedback_manager.FeedbackManager(db)


def get_settings_manager(
    db: Session = Depends(get_db),
) -> settings_manager.SettingsManager:
    return settings_manager.SettingsManager(db)


def get_deletion_request_manager(
    db: Session = Depends(get_db),
    file_store: FileStore = Depends(get_file_store),
) -> deletion_request_manager.DeletionRequestManager:
    """Get DeletionRequestManager instance with request-scoped DB session.

    The manager owns the resource managers its approval handlers delete through.
    """
    return deletion_request_manager.DeletionRequestManager(db, file_store=file_store)


# Type aliases for dependency injection
DbSessionDep = Annotated[Session, Depends(get_db)]
FileStoreDep = Annotated[FileStore, Depends(get_file_store)]
AuditLogManagerDep = Annotated[
    audit_logger.AuditLogManager, Depends(get_audit_log_manager)
]
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
CourseManagerDep = Annotated[
    course_manager.CourseManager, Depends(get_course_manager)
]
ScheduleManagerDep = Annotated[
    schedule_manager.ScheduleManager, Depends(get_schedule_manager)
]
SyllabusManagerDep = Annotated[
    syllabus_manager.SyllabusManager, Depends(get_syllabus_manager)
]
NoticeManagerDep = Annotated[
    notice_manager.NoticeManager, Depends(get_notice_manager)
]
HolidayManagerDep = Annotated[
    holiday_manager.HolidayManager, Depends(get_holiday_manager)
]
FeedbackManagerDep = Annotated[
    feedback_manager.FeedbackManager, Depends(get_feedback_manager)
]
SettingsManagerDep = Annotated[
    settings_manager.SettingsManager, Depends(get_settings_manager)
]
DeletionRequestManagerDep = Annotated[
    deletion_request_manager.DeletionRequestManager,
    Depends(get_deletion_request_manager),
]
