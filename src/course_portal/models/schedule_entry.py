from sqlalchemy import Boolean, Column, Integer, String
from .base import Base


class ScheduleEntryModel(Base):
    __tablename__ = "schedule_entries"

    entry_id = Column(String, primary_key=True, index=True)
    day = Column(String, nullable=False, index=True)  # "Sunday" .. "Saturday"
    start_time = Column(String, nullable=False)  # "HH:MM"
    end_time = Column(String, nullable=False)
    entry_type = Column(String, default="Class")
    course_id = Column(String, nullable=True)
    course_name = Column(String, nullable=True)
    instructor = Column(String, nullable=True)
    room = Column(String, nullable=True)
    recurrence = Column(String, default="weekly")  # weekly, odd, even
    color = Column(String, nullable=True)
    is_cancelled = Column(Boolean, default=False, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}
