"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, Integer, JSON, String
from .base import Base


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    user_id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=True)
    role = Column(String, nullable=False)  # 'admin' or 'editor'
    permissions = Column(JSON, default=dict)  # capability name -> bool
    create_at = Column(String, nullable=False)  # ISO format string
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}
