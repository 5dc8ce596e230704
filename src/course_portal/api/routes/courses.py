"""Course, course material and exam routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from course_portal.api.deferrable import delete_or_request
from course_portal.api.routes.auth import get_auth_context
from course_portal.core.dependencies import CourseManagerDep, DeletionRequestManagerDep
from course_portal.core.exceptions import NotFoundError
from course_portal.core.permissions import AuthContext, Capability
from course_portal.schemas.course import (
    CourseInfo,
    ExamInfo,
    ExamRequest,
    ReorderCoursesRequest,
)
from course_portal.utils.converters import course_to_info, exam_to_info

router = APIRouter(prefix="/api/courses", tags=["Course"])


@router.get("", response_model=List[CourseInfo], summary="List courses")
def list_courses(course_manager: CourseManagerDep) -> List[CourseInfo]:
    return [course_to_info(c) for c in course_manager.list_courses()]


@router.get("/{course_id}", response_model=CourseInfo, summary="Get course")
def get_course(course_id: str, course_manager: CourseManagerDep) -> CourseInfo:
    return course_to_info(course_manager.get_course(course_id))


@router.post("", response_model=CourseInfo, summary="Create or update course")
def save_course(
    course_manager: CourseManagerDep,
    course_id: str = Form(...),
    name: str = Form(...),
    instructor: Optional[str] = Form(None),
    files: List[UploadFile] = File(default=[]),
    ctx: AuthContext = Depends(get_auth_context),
) -> CourseInfo:
    """Upsert a course by id, attaching any uploaded files.

    Changing course details needs ``courses_edit``; a request that only adds
    files to an existing course also accepts ``course_materials_edit``.
    """
    try:
        current = course_manager.get_course(course_id.strip())
    except NotFoundError:
        current = None
    only_uploads = (
        current is not None
        and bool(files)
        and current.name == name.strip()
        and (current.instructor or None) == (instructor or None)
    )
    ctx.require("file" if only_uploads else "course")

    uploads = [(f.filename or "upload", f.file.read()) for f in files]
    course = course_manager.save_course(
        course_id, name, instructor, uploads=uploads, actor=ctx.username
    )
    return course_to_info(course)


@router.put("/order", response_model=List[CourseInfo], summary="Reorder courses")
def reorder_courses(
    req: ReorderCoursesRequest,
    course_manager: CourseManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> List[CourseInfo]:
    ctx.require("course")
    ordered = course_manager.reorder_courses(req.course_ids, actor=ctx.username)
    return [course_to_info(c) for c in ordered]


@router.delete("/{course_id}", summary="Delete course")
def delete_course(
    course_id: str,
    course_manager: CourseManagerDep,
    requests: DeletionRequestManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
):
    course = course_manager.get_course(course_id)
    return delete_or_request(
        ctx,
        requests,
        "course",
        course_id,
        lambda: course_manager.delete_course(course_id, actor=ctx.username),
        details={"name": course.name},
    )


@router.delete("/{course_id}/files/{file_id}", summary="Delete course file")
def delete_file(
    course_id: str,
    file_id: str,
    course_manager: CourseManagerDep,
    requests: DeletionRequestManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
):
    file_model = course_manager.get_file(course_id, file_id)
    return delete_or_request(
        ctx,
        requests,
        "file",
        file_id,
        lambda: course_manager.delete_file(course_id, file_id, actor=ctx.username),
        details={"courseId": course_id, "name": file_model.name},
    )


@router.post("/{course_id}/exams", response_model=ExamInfo, summary="Add exam")
def add_exam(
    course_id: str,
    req: ExamRequest,
    course_manager: CourseManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> ExamInfo:
    ctx.require_capability(Capability.EXAMS_EDIT)
    return exam_to_info(course_manager.add_exam(course_id, req, actor=ctx.username))


@router.put(
    "/{course_id}/exams/{exam_id}", response_model=ExamInfo, summary="Update exam"
)
def update_exam(
    course_id: str,
    exam_id: str,
    req: ExamRequest,
    course_manager: CourseManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> ExamInfo:
    ctx.require_capability(Capability.EXAMS_EDIT)
    exam = course_manager.update_exam(course_id, exam_id, req, actor=ctx.username)
    return exam_to_info(exam)


@router.delete("/{course_id}/exams/{exam_id}", summary="Delete exam")
def delete_exam(
    course_id: str,
    exam_id: str,
    course_manager: CourseManagerDep,
    requests: DeletionRequestManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
):
    exam = course_manager.get_exam(course_id, exam_id)
    return delete_or_request(
        ctx,
        requests,
        "exam",
        exam_id,
        lambda: course_manager.delete_exam(course_id, exam_id, actor=ctx.username),
        details={"courseId": course_id, "title": exam.title},
    )
