import pytest
from sqlalchemy.orm import Session

from course_portal.core.exceptions import ConflictError, NotFoundError, ValidationError
from course_portal.models.course import CourseFileModel, ExamModel
from course_portal.schemas.course import ExamRequest
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.course_manager import CourseManager
from course_portal.utils.store import commit


@pytest.fixture
def courses(db, file_store):
    return CourseManager(db, file_store=file_store)


def test_create_course_with_uploads(courses, file_store, db):
    course = courses.save_course(
        "cse-4101",
        "Compilers",
        "Dr. Rahman",
        uploads=[("lecture 1.pdf", b"%PDF"), ("diagram.PNG", b"\x89PNG")],
        actor="root",
    )

    assert course.position == 0
    by_name = {f.name: f for f in course.files}
    assert by_name["lecture 1.pdf"].file_type == "pdf"
    assert by_name["diagram.PNG"].file_type == "image"
    assert by_name["lecture 1.pdf"].storage_path == "materials/cse-4101/lecture 1.pdf"
    assert file_store.exists("materials/cse-4101/diagram.PNG")

    actions = [log.action for log in AuditLogManager(db).list_logs()]
    assert actions == ["CREATE_COURSE", "UPLOAD_FILE", "UPLOAD_FILE"]


def test_save_existing_course_updates_details(courses, db):
    courses.save_course("cse-4101", "Compilers", actor="root")
    courses.save_course("cse-4102", "Networks", actor="root")
    updated = courses.save_course("cse-4101", "Compiler Design", "Dr. Khan", actor="root")

    assert updated.name == "Compiler Design"
    assert updated.position == 0
    assert AuditLogManager(db).list_logs()[0].action == "UPDATE_COURSE"


@pytest.mark.parametrize("course_id", ["old/cse-4101", "../cse-4101", ".cse-4101", "cse#4101"])
def test_course_ids_that_alias_a_directory_are_rejected(courses, file_store, course_id):
    courses.save_course("cse-4101", "Compilers", uploads=[("lecture.pdf", b"%PDF")])

    with pytest.raises(ValidationError):
        courses.save_course(course_id, "Old Compilers")

    assert [c.course_id for c in courses.list_courses()] == ["cse-4101"]
    assert file_store.exists("materials/cse-4101/lecture.pdf")


def test_reupload_replaces_file_row(courses, file_store):
    courses.save_course("cse-4101", "Compilers", uploads=[("notes.pdf", b"v1")])
    course = courses.save_course("cse-4101", "Compilers", uploads=[("notes.pdf", b"v2")])

    assert [f.name for f in course.files] == ["notes.pdf"]
    assert file_store.resolve("materials/cse-4101/notes.pdf").read_bytes() == b"v2"


def test_reorder_courses(courses):
    for cid in ("a", "b", "c"):
        courses.save_course(cid, cid.upper())

    courses.reorder_courses(["c", "a"], actor="root")

    assert [c.course_id for c in courses.list_courses()] == ["c", "a", "b"]
    with pytest.raises(ValidationError):
        courses.reorder_courses(["a", "zzz"])


def test_delete_course_removes_children_and_directory(courses, file_store, db):
    courses.save_course("cse-4101", "Compilers", uploads=[("notes.pdf", b"x")])
    courses.add_exam("cse-4101", ExamRequest(title="Midterm", date="2024-03-01"))

    courses.delete_course("cse-4101", actor="root")

    with pytest.raises(NotFoundError):
        courses.get_course("cse-4101")
    assert db.query(CourseFileModel).count() == 0
    assert db.query(ExamModel).count() == 0
    assert not (file_store.root / "materials" / "cse-4101").exists()
    assert AuditLogManager(db).list_logs()[0].action == "DELETE_COURSE"


def test_delete_without_actor_writes_no_audit_entry(courses, db):
    courses.save_course("cse-4101", "Compilers")
    before = len(AuditLogManager(db).list_logs())

    courses.delete_course("cse-4101")

    assert len(AuditLogManager(db).list_logs()) == before


def test_delete_file_tolerates_missing_stored_object(courses, file_store):
    course = courses.save_course("cse-4101", "Compilers", uploads=[("notes.pdf", b"x")])
    file_id = course.files[0].file_id
    file_store.resolve("materials/cse-4101/notes.pdf").unlink()

    courses.delete_file("cse-4101", file_id, actor="root")

    assert courses.get_course("cse-4101").files == []
    with pytest.raises(NotFoundError):
        courses.delete_file("cse-4101", file_id)


def test_exams(courses):
    courses.save_course("cse-4101", "Compilers")
    exam = courses.add_exam("cse-4101", ExamRequest(title="Quiz 1", time="10:00"))
    updated = courses.update_exam(
        "cse-4101", exam.exam_id, ExamRequest(title="Quiz 1 (moved)", time="11:00")
    )
    assert updated.title == "Quiz 1 (moved)"

    with pytest.raises(NotFoundError):
        courses.add_exam("missing", ExamRequest(title="Final"))
    with pytest.raises(NotFoundError):
        courses.delete_exam("missing", exam.exam_id)

    courses.delete_exam("cse-4101", exam.exam_id)
    assert courses.get_course("cse-4101").exams == []


def test_concurrent_update_is_a_conflict(db, courses):
    courses.save_course("cse-4101", "Compilers")
    exam = courses.add_exam("cse-4101", ExamRequest(title="Quiz"))

    other = Session(bind=db.get_bind())
    try:
        stale = other.query(ExamModel).filter_by(exam_id=exam.exam_id).one()
        courses.update_exam("cse-4101", exam.exam_id, ExamRequest(title="Quiz A"))

        stale.title = "Quiz B"
        with pytest.raises(ConflictError):
            commit(other, "update exam")
    finally:
        other.close()

    assert courses.get_exam("cse-4101", exam.exam_id).title == "Quiz A"
