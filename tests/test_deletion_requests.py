"""Deletion request lifecycle and approval dispatch."""

from unittest.mock import patch

import pytest

from course_portal.core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    StoreFailureError,
    ValidationError,
)
from course_portal.models.course import CourseFileModel
from course_portal.models.deletion_request import DeletionRequestModel
from course_portal.schemas.course import ExamRequest
from course_portal.schemas.notice import Notice
from course_portal.schemas.schedule import ScheduleEntry
from course_portal.schemas.syllabus import SyllabusEntry
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.deletion_request_manager import (
    DeletionRequestManager,
    register_deletion_handler,
    supported_types,
)


@pytest.fixture
def manager(db, file_store):
    return DeletionRequestManager(db, file_store=file_store)


@pytest.fixture
def course_with_file(manager):
    course = manager.courses.save_course(
        "cse-4101", "Compilers", uploads=[("notes.pdf", b"%PDF")]
    )
    return course


def _pending_ids(manager):
    return [r.id for r in manager.list_requests()]


def test_supported_types():
    assert supported_types() == [
        "course",
        "exam",
        "file",
        "notice",
        "schedule",
        "syllabus",
    ]


def test_submit_is_pending_and_unaudited(manager, db):
    request = manager.submit_request("course", "cse-4101", {}, requested_by="editor")

    assert request.status == "pending"
    assert request.id.startswith("req-")
    assert _pending_ids(manager) == [request.id]
    assert AuditLogManager(db).list_logs() == []


def test_approve_course_removes_course_files_and_request(
    manager, course_with_file, admin, db, file_store
):
    request = manager.submit_request("course", "cse-4101", {}, requested_by="editor")
    audit_before = len(AuditLogManager(db).list_logs())

    manager.approve_request(request.id, admin)

    with pytest.raises(NotFoundError):
        manager.courses.get_course("cse-4101")
    assert db.query(CourseFileModel).count() == 0
    assert not (file_store.root / "materials" / "cse-4101").exists()
    assert manager.list_requests() == []

    logs = AuditLogManager(db).list_logs()
    assert len(logs) == audit_before + 1
    assert logs[0].action == "APPROVE_DELETION"
    assert logs[0].username == admin.username
    assert "cse-4101" in logs[0].details and "editor" in logs[0].details


def test_approve_file_uses_course_id_from_details(
    manager, course_with_file, admin, file_store
):
    file_id = course_with_file.files[0].file_id
    request = manager.submit_request(
        "file", file_id, {"courseId": "cse-4101"}, requested_by="editor"
    )

    with patch.object(
        manager.courses, "delete_file", wraps=manager.courses.delete_file
    ) as delete_file:
        manager.approve_request(request.id, admin)

    delete_file.assert_called_once_with("cse-4101", file_id)
    assert manager.courses.get_course("cse-4101").files == []
    assert not file_store.exists("materials/cse-4101/notes.pdf")


@pytest.mark.parametrize("resource_type", ["file", "exam"])
def test_nested_types_without_course_id_stay_pending(
    manager, course_with_file, admin, resource_type
):
    request = manager.submit_request(resource_type, "anything", {}, requested_by="ed")

    with pytest.raises(ValidationError):
        manager.approve_request(request.id, admin)

    assert _pending_ids(manager) == [request.id]


def test_approve_exam(manager, course_with_file, admin):
    exam = manager.courses.add_exam("cse-4101", ExamRequest(title="Final"))
    request = manager.submit_request(
        "exam", exam.exam_id, {"courseId": "cse-4101"}, requested_by="ed"
    )

    manager.approve_request(request.id, admin)

    assert manager.courses.get_course("cse-4101").exams == []


def test_approve_schedule_syllabus_and_notice(manager, admin, file_store):
    entry = manager.schedule.save_entry(
        ScheduleEntry(day="Sunday", start_time="09:00", end_time="10:00")
    )
    manager.syllabus.save_entry(SyllabusEntry(code="CSE-4101", title="Compilers"))
    pdf_path = manager.notices.store_document("exam-routine.pdf", b"%PDF")
    notice = manager.notices.save_notice(
        Notice(title="Exam routine", date="2024-05-01", pdf_path=pdf_path)
    )

    for resource_type, resource_id in [
        ("schedule", entry.entry_id),
        ("syllabus", "CSE-4101"),
        ("notice", notice.notice_id),
    ]:
        request = manager.submit_request(resource_type, resource_id, {}, "ed")
        manager.approve_request(request.id, admin)

    assert manager.schedule.list_entries() == []
    assert manager.syllabus.list_entries() == []
    assert manager.notices.list_notices() == []
    assert not file_store.exists(pdf_path)
    assert manager.list_requests() == []


def test_reject_removes_request_without_touching_resource(
    manager, course_with_file, admin, db
):
    request = manager.submit_request("course", "cse-4101", {}, requested_by="editor")

    manager.reject_request(request.id, admin)

    assert manager.list_requests() == []
    assert manager.courses.get_course("cse-4101").name == "Compilers"
    assert AuditLogManager(db).list_logs()[0].action == "REJECT_DELETION"


def test_reject_missing_request_changes_nothing(manager, admin, db):
    kept = manager.submit_request("course", "cse-4101", {}, requested_by="editor")

    with pytest.raises(NotFoundError):
        manager.reject_request("req-does-not-exist", admin)

    assert _pending_ids(manager) == [kept.id]
    assert AuditLogManager(db).list_logs() == []


def test_unknown_type_stays_pending(manager, admin):
    request = manager.submit_request("widget", "w-1", {}, requested_by="editor")

    with pytest.raises(ValidationError):
        manager.approve_request(request.id, admin)

    assert _pending_ids(manager) == [request.id]
    assert manager.list_requests()[0].status == "pending"


def test_missing_target_keeps_request_pending(manager, admin):
    request = manager.submit_request("course", "gone", {}, requested_by="editor")

    with pytest.raises(NotFoundError):
        manager.approve_request(request.id, admin)

    assert _pending_ids(manager) == [request.id]


def test_store_failure_keeps_request_pending(manager, course_with_file, admin):
    request = manager.submit_request("course", "cse-4101", {}, requested_by="editor")

    with patch.object(
        manager.courses, "delete_course", side_effect=StoreFailureError("boom")
    ):
        with pytest.raises(StoreFailureError):
            manager.approve_request(request.id, admin)

    assert _pending_ids(manager) == [request.id]
    assert manager.courses.get_course("cse-4101")


def test_only_admins_decide(manager, course_with_file, course_editor):
    request = manager.submit_request("course", "cse-4101", {}, requested_by="editor")

    with pytest.raises(PermissionDeniedError):
        manager.approve_request(request.id, course_editor)
    with pytest.raises(PermissionDeniedError):
        manager.reject_request(request.id, course_editor)

    assert _pending_ids(manager) == [request.id]
    assert manager.courses.get_course("cse-4101")


def test_registering_a_new_type(manager, admin, db):
    deleted = []

    @register_deletion_handler("gadget")
    def _delete_gadget(mgr, request):
        deleted.append(request.resource_id)

    try:
        request = manager.submit_request("gadget", "g-1", {}, requested_by="ed")
        manager.approve_request(request.id, admin)
        assert deleted == ["g-1"]
        assert db.query(DeletionRequestModel).count() == 0
    finally:
        from course_portal.utils import deletion_request_manager

        deletion_request_manager._HANDLERS.pop("gadget", None)
