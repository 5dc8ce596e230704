"""Conversions between SQLAlchemy models and pydantic schemas."""

from course_portal.models.audit_log import AuditLogModel
from course_portal.models.course import CourseFileModel, CourseModel, ExamModel
from course_portal.models.deletion_request import DeletionRequestModel
from course_portal.models.feedback import ComplaintModel, MessageModel, OpinionModel
from course_portal.models.holiday import HolidayModel
from course_portal.models.notice import NoticeModel
from course_portal.models.schedule_entry import ScheduleEntryModel
from course_portal.models.syllabus_entry import SyllabusEntryModel
from course_portal.models.user import UserModel
from course_portal.schemas.course import CourseFileInfo, CourseInfo, ExamInfo
from course_portal.schemas.feedback import Complaint, Message, Opinion
from course_portal.schemas.holiday import Holiday
from course_portal.schemas.moderation import AuditLogEntry, DeletionRequest
from course_portal.schemas.notice import Notice
from course_portal.schemas.schedule import ScheduleEntry
from course_portal.schemas.syllabus import SyllabusEntry
from course_portal.schemas.user import PublicUser, User


def user_to_model(user: User) -> UserModel:
    return UserModel(
        user_id=user.user_id,
        username=user.username,
        password_hash=user.password_hash,
        name=user.name,
        role=user.role,
        permissions=dict(user.permissions),
        create_at=user.create_at,
    )


def model_to_user(model: UserModel) -> User:
    return User(
        user_id=model.user_id,
        username=model.username,
        password_hash=model.password_hash,
        name=model.name,
        role=model.role,
        permissions=dict(model.permissions or {}),
        create_at=model.create_at,
    )


def to_public_user(user: User) -> PublicUser:
    """Strip the password hash before a user leaves the API."""
    return PublicUser(**user.model_dump(exclude={"password_hash"}))


def file_to_info(model: CourseFileModel) -> CourseFileInfo:
    return CourseFileInfo(
        file_id=model.file_id,
        course_id=model.course_id,
        name=model.name,
        file_type=model.file_type,
        path=model.storage_path,
        uploaded_by=model.uploaded_by,
        upload_date=model.upload_date,
    )


def exam_to_info(model: ExamModel) -> ExamInfo:
    return ExamInfo(
        exam_id=model.exam_id,
        course_id=model.course_id,
        title=model.title,
        date=model.date,
        time=model.time,
        syllabus=model.syllabus or "",
    )


def course_to_info(model: CourseModel) -> CourseInfo:
    return CourseInfo(
        course_id=model.course_id,
        name=model.name,
        instructor=model.instructor,
        position=model.position or 0,
        files=[file_to_info(f) for f in model.files],
        exams=[exam_to_info(e) for e in model.exams],
    )


def schedule_to_schema(model: ScheduleEntryModel) -> ScheduleEntry:
    return ScheduleEntry(
        entry_id=model.entry_id,
        day=model.day,
        start_time=model.start_time,
        end_time=model.end_time,
        entry_type=model.entry_type or "Class",
        course_id=model.course_id,
        course_name=model.course_name,
        instructor=model.instructor,
        room=model.room,
        recurrence=model.recurrence or "weekly",
        color=model.color,
        is_cancelled=bool(model.is_cancelled),
    )


def syllabus_to_schema(model: SyllabusEntryModel) -> SyllabusEntry:
    return SyllabusEntry(
        code=model.code,
        title=model.title,
        course_type=model.course_type,
        credit=model.credit,
        hours=model.hours,
        description=model.description or "",
    )


def notice_to_schema(model: NoticeModel) -> Notice:
    return Notice(
        notice_id=model.notice_id,
        title=model.title,
        date=model.date,
        valid_until=model.valid_until,
        category=model.category or "General",
        description=model.description or "",
        content=model.content or "",
        pdf_path=model.pdf_path,
    )


def holiday_to_schema(model: HolidayModel) -> Holiday:
    return Holiday(
        holiday_id=model.holiday_id,
        date=model.date,
        title=model.title,
        holiday_type=model.holiday_type or "custom",
        is_cancelled=bool(model.is_cancelled),
        note=model.note or "",
    )


def message_to_schema(model: MessageModel) -> Message:
    return Message(
        message_id=model.message_id,
        name=model.name,
        email=model.email,
        subject=model.subject or "",
        message=model.message,
        date=model.date,
    )


def complaint_to_schema(model: ComplaintModel) -> Complaint:
    return Complaint(
        complaint_id=model.complaint_id,
        subject=model.subject,
        department=model.department or "",
        description=model.description,
        anonymous=bool(model.anonymous),
        date=model.date,
    )


def opinion_to_schema(model: OpinionModel) -> Opinion:
    return Opinion(
        opinion_id=model.opinion_id,
        rating=model.rating,
        feedback=model.feedback or "",
        date=model.date,
    )


def deletion_request_to_schema(model: DeletionRequestModel) -> DeletionRequest:
    return DeletionRequest(
        id=model.id,
        type=model.type,
        resource_id=model.resource_id,
        details=dict(model.details or {}),
        requested_by=model.requested_by,
        date=model.date,
        status=model.status,
    )


def audit_log_to_schema(model: AuditLogModel) -> AuditLogEntry:
    return AuditLogEntry(
        id=model.id,
        date=model.date,
        action=model.action,
        username=model.username,
        details=model.details or "",
    )
