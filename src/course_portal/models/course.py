from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base


class CourseModel(Base):
    __tablename__ = "courses"

    course_id = Column(String, primary_key=True, index=True)  # e.g. "cse-4101"
    name = Column(String, nullable=False)
    instructor = Column(String, nullable=True)
    position = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=1)

    files = relationship(
        "CourseFileModel",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseFileModel.upload_date",
    )
    exams = relationship(
        "ExamModel",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="ExamModel.date",
    )

    __mapper_args__ = {"version_id_col": version}


class CourseFileModel(Base):
    __tablename__ = "course_files"

    file_id = Column(String, primary_key=True, index=True)
    course_id = Column(
        String, ForeignKey("courses.course_id", ondelete="CASCADE"), index=True
    )
    name = Column(String, nullable=False)
    file_type = Column(String, nullable=False)  # 'image' or 'pdf'
    storage_path = Column(String, nullable=False)  # relative to UPLOADS_DIR
    uploaded_by = Column(String, nullable=True)
    upload_date = Column(String, nullable=False)

    course = relationship("CourseModel", back_populates="files")


class ExamModel(Base):
    __tablename__ = "exams"

    exam_id = Column(String, primary_key=True, index=True)
    course_id = Column(
        String, ForeignKey("courses.course_id", ondelete="CASCADE"), index=True
    )
    title = Column(String, nullable=False)
    date = Column(String, nullable=True)
    time = Column(String, nullable=True)
    syllabus = Column(String, default="")
    version = Column(Integer, nullable=False, default=1)

    course = relationship("CourseModel", back_populates="exams")

    __mapper_args__ = {"version_id_col": version}
