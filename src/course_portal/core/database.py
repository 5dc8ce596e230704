"""Database connection and session management.

This module handles the database connection using SQLAlchemy.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from course_portal.config import DATA_DIR, DATABASE_URL
from course_portal.models.base import Base
# Import models to ensure they are registered with Base.metadata
import course_portal.models  # noqa: F401

logger = logging.getLogger(__name__)

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    """Create tables if they do not exist and seed the first admin.

    Args:
        bind: Optional engine to initialize instead of the configured one.
    """
    from course_portal.utils.user_manager import UserManager

    if bind is None and DATABASE_URL.startswith("sqlite"):
        # Ensure data directory exists
        DATA_DIR.mkdir(parents=True, exist_ok=True)

    target = bind or engine
    Base.metadata.create_all(bind=target)

    factory = sessionmaker(autocommit=False, autoflush=False, bind=target)
    db = factory()
    try:
        UserManager(db).ensure_default_admin()
    finally:
        db.close()
    logger.info("Database initialized")


def get_db():
    """Dependency for getting a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
