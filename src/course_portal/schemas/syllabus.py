from typing import Optional

from pydantic import BaseModel, Field


class SyllabusEntry(BaseModel):
    code: str = Field(min_length=1, description="Course code; natural key.")
    title: str
    course_type: Optional[str] = None
    credit: Optional[str] = None
    hours: Optional[str] = None
    description: str = ""
