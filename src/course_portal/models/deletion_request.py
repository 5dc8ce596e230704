"""Deletion request database model.

A deletion request is a destructive operation deferred for admin approval.
"""

from sqlalchemy import Column, JSON, String
from .base import Base


class DeletionRequestModel(Base):
    """Deletion request database model."""

    __tablename__ = "deletion_requests"

    id = Column(String, primary_key=True, index=True)  # "req-<ms>-<n>"
    type = Column(String, nullable=False)  # course, file, exam, schedule, syllabus, notice
    resource_id = Column(String, nullable=False)
    details = Column(JSON, default=dict)  # carries courseId for file and exam
    requested_by = Column(String, nullable=False)  # username
    date = Column(String, nullable=False)  # ISO format string
    status = Column(String, nullable=False, default="pending")
