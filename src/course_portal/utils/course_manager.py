"""Course management utilities: courses, their material files, and exams."""

import logging
from pathlib import PurePosixPath
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from course_portal import config
from course_portal.core.exceptions import NotFoundError, ValidationError
from course_portal.models.course import CourseFileModel, CourseModel, ExamModel
from course_portal.schemas.course import ExamRequest
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.file_store import FileStore, sanitize_name
from course_portal.utils.store import commit, generate_id, utc_now_iso

logger = logging.getLogger(__name__)


def course_namespace(course_id: str) -> str:
    """Store-relative directory of one course's uploaded materials."""
    return f"{config.MATERIALS_DIR_NAME}/{sanitize_name(course_id)}"


def detect_file_type(filename: str) -> str:
    return "image" if PurePosixPath(filename).suffix.lower() in config.IMAGE_EXTENSIONS else "pdf"


class CourseManager:
    """Manages courses, course files and exams."""

    def __init__(
        self,
        db: Session,
        audit: Optional[AuditLogManager] = None,
        file_store: Optional[FileStore] = None,
    ):
        self.db = db
        self.audit = audit or AuditLogManager(db)
        self.file_store = file_store or FileStore()

    # --- Courses ---

    def list_courses(self) -> List[CourseModel]:
        return (
            self.db.query(CourseModel)
            .options(selectinload(CourseModel.files), selectinload(CourseModel.exams))
            .order_by(CourseModel.position, CourseModel.course_id)
            .all()
        )

    def get_course(self, course_id: str) -> CourseModel:
        model = (
            self.db.query(CourseModel)
            .filter(CourseModel.course_id == course_id)
            .first()
        )
        if not model:
            raise NotFoundError("Course", course_id)
        return model

    def save_course(
        self,
        course_id: str,
        name: str,
        instructor: Optional[str] = None,
        uploads: Iterable[Tuple[str, bytes]] = (),
        actor: Optional[str] = None,
    ) -> CourseModel:
        """Create a course or update its details, storing any uploaded files.

        Args:
            course_id: Natural key of the course, e.g. "cse-4101".
            name: Course name.
            instructor: Optional instructor name.
            uploads: (filename, content) pairs stored under the course namespace.
            actor: Username recorded on files and in the audit log.

        Returns:
            The saved course.
        """
        course_id = course_id.strip()
        if not course_id or not name or not name.strip():
            raise ValidationError("Course id and name are required.")
        # Each course owns exactly one materials directory
        if sanitize_name(course_id) != course_id:
            raise ValidationError(
                f"Invalid course id '{course_id}': use letters, digits, '-', '_' or '.'."
            )
        namespace = course_namespace(course_id)

        course = (
            self.db.query(CourseModel)
            .filter(CourseModel.course_id == course_id)
            .first()
        )
        is_new = course is None
        if is_new:
            next_position = self.db.query(func.max(CourseModel.position)).scalar()
            course = CourseModel(
                course_id=course_id,
                name=name.strip(),
                instructor=instructor,
                position=(next_position + 1) if next_position is not None else 0,
            )
            self.db.add(course)
        else:
            course.name = name.strip()
            course.instructor = instructor

        stored = []
        for filename, content in uploads:
            relative_path = self.file_store.save(namespace, filename, content)
            stored.append(relative_path)
            # Re-uploading a name overwrites the object, so one row per path
            for replaced in [f for f in course.files if f.storage_path == relative_path]:
                course.files.remove(replaced)
            course.files.append(
                CourseFileModel(
                    file_id=generate_id("file"),
                    name=PurePosixPath(relative_path).name,
                    file_type=detect_file_type(relative_path),
                    storage_path=relative_path,
                    uploaded_by=actor,
                    upload_date=utc_now_iso(),
                )
            )
        commit(self.db, "save course")
        self.db.refresh(course)

        logger.info(
            "%s course %s with %d new files",
            "Created" if is_new else "Updated",
            course_id,
            len(stored),
        )
        for relative_path in stored:
            self.audit.append(
                "UPLOAD_FILE",
                actor,
                f"Uploaded {PurePosixPath(relative_path).name} to {course_id}",
            )
        if is_new:
            self.audit.append("CREATE_COURSE", actor, f"Created course {course_id}")
        else:
            self.audit.append("UPDATE_COURSE", actor, f"Updated course {course_id}")
        return course

    def reorder_courses(
        self, course_ids: List[str], actor: Optional[str] = None
    ) -> List[CourseModel]:
        """Set the display order. Courses not listed keep their relative order after."""
        if len(set(course_ids)) != len(course_ids):
            raise ValidationError("Duplicate course ids in reorder list.")
        courses = self.list_courses()
        by_id = {c.course_id: c for c in courses}
        unknown = [cid for cid in course_ids if cid not in by_id]
        if unknown:
            raise ValidationError(f"Unknown course ids: {', '.join(unknown)}")

        ordered = [by_id[cid] for cid in course_ids]
        ordered += [c for c in courses if c.course_id not in set(course_ids)]
        for position, course in enumerate(ordered):
            if course.position != position:
                course.position = position
        commit(self.db, "reorder courses")
        logger.info("Reordered %d courses", len(ordered))
        self.audit.append("REORDER_COURSES", actor, f"Reordered {len(ordered)} courses")
        return ordered

    def delete_course(self, course_id: str, actor: Optional[str] = None) -> None:
        """Delete a course, its file and exam rows, and its stored materials.

        Args:
            course_id: Course to delete.
            actor: When given, a DELETE_COURSE audit entry is written for them.

        Raises:
            NotFoundError: If the course does not exist.
        """
        course = self.get_course(course_id)
        self.db.delete(course)
        commit(self.db, "delete course")
        logger.info("Deleted course: %s", course_id)

        # Row deletion stands even if the directory cannot be removed
        self.file_store.delete_tree(course_namespace(course_id))
        if actor is not None:
            self.audit.append("DELETE_COURSE", actor, f"Deleted course {course_id}")

    # --- Files ---

    def get_file(self, course_id: str, file_id: str) -> CourseFileModel:
        self.get_course(course_id)
        model = (
            self.db.query(CourseFileModel)
            .filter(
                CourseFileModel.course_id == course_id,
                CourseFileModel.file_id == file_id,
            )
            .first()
        )
        if not model:
            raise NotFoundError("File", file_id)
        return model

    def delete_file(
        self, course_id: str, file_id: str, actor: Optional[str] = None
    ) -> None:
        """Remove a file row, then its stored object.

        A stored object that is already missing does not fail the removal.

        Raises:
            NotFoundError: If the course or the file does not exist.
        """
        file_model = self.get_file(course_id, file_id)
        name, storage_path = file_model.name, file_model.storage_path
        self.db.delete(file_model)
        commit(self.db, "delete file")
        logger.info("Deleted file %s from course %s", file_id, course_id)

        self.file_store.delete(storage_path)
        if actor is not None:
            self.audit.append(
                "DELETE_FILE", actor, f"Deleted file {name} from {course_id}"
            )

    # --- Exams ---

    def get_exam(self, course_id: str, exam_id: str) -> ExamModel:
        self.get_course(course_id)
        model = (
            self.db.query(ExamModel)
            .filter(ExamModel.course_id == course_id, ExamModel.exam_id == exam_id)
            .first()
        )
        if not model:
            raise NotFoundError("Exam", exam_id)
        return model

    def add_exam(
        self, course_id: str, req: ExamRequest, actor: Optional[str] = None
    ) -> ExamModel:
        self.get_course(course_id)
        exam = ExamModel(
            exam_id=generate_id("exam"),
            course_id=course_id,
            title=req.title,
            date=req.date,
            time=req.time,
            syllabus=req.syllabus or "",
        )
        self.db.add(exam)
        commit(self.db, "add exam")
        self.db.refresh(exam)
        logger.info("Added exam %s to %s", exam.exam_id, course_id)
        self.audit.append("ADD_EXAM", actor, f"Added exam {req.title} to {course_id}")
        return exam

    def update_exam(
        self,
        course_id: str,
        exam_id: str,
        req: ExamRequest,
        actor: Optional[str] = None,
    ) -> ExamModel:
        exam = self.get_exam(course_id, exam_id)
        exam.title = req.title
        exam.date = req.date
        exam.time = req.time
        exam.syllabus = req.syllabus or ""
        commit(self.db, "update exam")
        self.db.refresh(exam)
        logger.info("Updated exam %s in %s", exam_id, course_id)
        self.audit.append(
            "UPDATE_EXAM", actor, f"Updated exam {req.title} in {course_id}"
        )
        return exam

    def delete_exam(
        self, course_id: str, exam_id: str, actor: Optional[str] = None
    ) -> None:
        """Delete an exam row.

        Raises:
            NotFoundError: If the course or the exam does not exist.
        """
        exam = self.get_exam(course_id, exam_id)
        title = exam.title
        self.db.delete(exam)
        commit(self.db, "delete exam")
        logger.info("Deleted exam %s from %s", exam_id, course_id)
        if actor is not None:
            self.audit.append(
                "DELETE_EXAM", actor, f"Deleted exam {title} from {course_id}"
            )

    # --- Cleanup ---

    def referenced_paths(self) -> List[str]:
        return [row.storage_path for row in self.db.query(CourseFileModel.storage_path)]
