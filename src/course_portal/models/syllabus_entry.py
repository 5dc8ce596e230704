from sqlalchemy import Column, Integer, String, Text
from .base import Base


class SyllabusEntryModel(Base):
    __tablename__ = "syllabus_entries"

    code = Column(String, primary_key=True, index=True)  # course code
    title = Column(String, nullable=False)
    course_type = Column(String, nullable=True)  # e.g. "Theory", "Lab"
    credit = Column(String, nullable=True)
    hours = Column(String, nullable=True)
    description = Column(Text, default="")
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}
