"""Shared fixtures: in-memory database, temporary upload store, users, API client."""

from typing import Dict, Generator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from course_portal import config
from course_portal.api.routes.auth import create_access_token
from course_portal.app import app
from course_portal.core.database import get_db
from course_portal.core.dependencies import get_file_store
from course_portal.core.permissions import default_permissions
from course_portal.models.base import Base
from course_portal.schemas.user import ROLE_ADMIN, ROLE_EDITOR, User
from course_portal.utils import user_manager as user_manager_module
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.converters import user_to_model
from course_portal.utils.file_store import FileStore


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Cheap hashing so tests creating users stay fast."""
    monkeypatch.setattr(user_manager_module, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a test database session using SQLite in-memory."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def file_store(tmp_path, monkeypatch) -> FileStore:
    uploads = tmp_path / "uploads"
    monkeypatch.setattr(config, "UPLOADS_DIR", uploads)
    return FileStore(uploads)


@pytest.fixture
def audit(db) -> AuditLogManager:
    return AuditLogManager(db)


def make_user(
    db: Session,
    username: str,
    role: str = ROLE_EDITOR,
    permissions: Optional[Dict[str, bool]] = None,
    password: str = "secret",
) -> User:
    """Insert a user row directly, leaving the audit log untouched."""
    granted = default_permissions()
    granted.update(permissions or {})
    manager = user_manager_module.UserManager(db)
    user = User(
        username=username,
        password_hash=manager.hash_password(password),
        name=username.title(),
        role=role,
        permissions=granted,
    )
    db.add(user_to_model(user))
    db.commit()
    return user


@pytest.fixture
def admin(db) -> User:
    return make_user(db, "root", role=ROLE_ADMIN)


@pytest.fixture
def editor(db) -> User:
    """Editor holding no capabilities."""
    return make_user(db, "editor")


@pytest.fixture
def course_editor(db) -> User:
    return make_user(
        db,
        "course-editor",
        permissions={"courses_edit": True, "exams_edit": True},
    )


@pytest.fixture
def client(db, file_store) -> Generator[TestClient, None, None]:
    """API client bound to the test database and upload store."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_file_store] = lambda: file_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """Bearer headers for any user, so one test can act as several callers."""
    return auth_headers
