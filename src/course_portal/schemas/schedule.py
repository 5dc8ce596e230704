from typing import Optional

from pydantic import BaseModel, Field

WEEK_DAYS = (
    "Saturday",
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
)
RECURRENCES = ("weekly", "odd", "even")


class ScheduleEntry(BaseModel):
    """One recurring class or event on the weekly timetable."""

    entry_id: Optional[str] = Field(
        default=None, description="Omit to create; provide to update."
    )
    day: str
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    entry_type: str = "Class"
    course_id: Optional[str] = None
    course_name: Optional[str] = None
    instructor: Optional[str] = None
    room: Optional[str] = None
    recurrence: str = "weekly"
    color: Optional[str] = None
    is_cancelled: bool = False


class CancelClassRequest(BaseModel):
    is_cancelled: bool
