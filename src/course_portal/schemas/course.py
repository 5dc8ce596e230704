"""Course, course file and exam schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field


class CourseFileInfo(BaseModel):
    file_id: str
    course_id: str
    name: str
    file_type: str = Field(description="'image' or 'pdf'.")
    path: str = Field(description="Path of the stored file, relative to the uploads root.")
    uploaded_by: Optional[str] = None
    upload_date: str


class ExamInfo(BaseModel):
    exam_id: str
    course_id: str
    title: str
    date: Optional[str] = None
    time: Optional[str] = None
    syllabus: str = ""


class CourseInfo(BaseModel):
    course_id: str
    name: str
    instructor: Optional[str] = None
    position: int = 0
    files: List[CourseFileInfo] = []
    exams: List[ExamInfo] = []


class ExamRequest(BaseModel):
    title: str = Field(min_length=1)
    date: Optional[str] = None
    time: Optional[str] = None
    syllabus: str = ""


class ReorderCoursesRequest(BaseModel):
    course_ids: List[str] = Field(description="Course ids in their new display order.")
