from .base import Base
from .user import UserModel
from .course import CourseModel, CourseFileModel, ExamModel
from .schedule_entry import ScheduleEntryModel
from .syllabus_entry import SyllabusEntryModel
from .notice import NoticeModel
from .holiday import HolidayModel
from .feedback import MessageModel, ComplaintModel, OpinionModel
from .setting import SettingModel
from .deletion_request import DeletionRequestModel
from .audit_log import AuditLogModel

__all__ = [
    "Base",
    "UserModel",
    "CourseModel",
    "CourseFileModel",
    "ExamModel",
    "ScheduleEntryModel",
    "SyllabusEntryModel",
    "NoticeModel",
    "HolidayModel",
    "MessageModel",
    "ComplaintModel",
    "OpinionModel",
    "SettingModel",
    "DeletionRequestModel",
    "AuditLogModel",
]
