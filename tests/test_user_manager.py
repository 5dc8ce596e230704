import pytest

from course_portal import config
from course_portal.core.exceptions import (
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)
from course_portal.models.user import UserModel
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.user_manager import UserAlreadyExistsError, UserManager

from conftest import make_user


def test_password_is_hashed_and_verified(db):
    manager = UserManager(db)
    user = manager.create_user("alice", "pa55word", actor="root")

    assert user.password_hash != "pa55word"
    assert user.password_hash.startswith("$2")
    assert manager.authenticate("alice", "pa55word").username == "alice"
    assert manager.authenticate("alice", "wrong") is None
    assert manager.authenticate("nobody", "pa55word") is None


def test_create_user_defaults(db):
    manager = UserManager(db)
    user = manager.create_user("bob", "secret", actor="root")

    assert user.role == "editor"
    assert user.permissions and not any(user.permissions.values())
    assert AuditLogManager(db).list_logs()[0].action == "CREATE_USER"


def test_create_user_rejects_duplicates_and_short_passwords(db):
    manager = UserManager(db)
    manager.create_user("carol", "secret")

    with pytest.raises(UserAlreadyExistsError):
        manager.create_user("carol", "another")
    with pytest.raises(ValidationError):
        manager.create_user("dave", "abc")
    with pytest.raises(ValidationError):
        manager.create_user("erin", "secret", role="owner")


def test_permissions_merge_and_drop_unknown(db):
    manager = UserManager(db)
    user = manager.create_user("frank", "secret", permissions={"notices_edit": True})

    updated = manager.set_permissions(
        user.user_id, {"courses_edit": True, "fly": True, "exams_edit": "yes"}
    )

    assert updated.permissions["notices_edit"] is True
    assert updated.permissions["courses_edit"] is True
    assert "fly" not in updated.permissions
    assert updated.permissions["exams_edit"] is False


def test_cannot_delete_last_admin(db):
    root = make_user(db, "root", role="admin")
    manager = UserManager(db)

    with pytest.raises(InvariantViolationError):
        manager.delete_user(root.user_id, actor="root")
    assert db.query(UserModel).count() == 1


def test_can_delete_admin_when_another_remains(db):
    root = make_user(db, "root", role="admin")
    make_user(db, "backup", role="admin")
    manager = UserManager(db)

    manager.delete_user(root.user_id, actor="backup")

    assert manager.get_user_by_username("root") is None
    assert AuditLogManager(db).list_logs()[0].action == "DELETE_USER"


def test_editor_deletion_is_not_blocked_by_admin_count(db):
    make_user(db, "root", role="admin")
    editor = make_user(db, "ed")
    UserManager(db).delete_user(editor.user_id)
    assert db.query(UserModel).count() == 1


def test_cannot_demote_last_admin(db):
    root = make_user(db, "root", role="admin")
    manager = UserManager(db)

    with pytest.raises(InvariantViolationError):
        manager.update_user(root.user_id, role="editor")
    assert manager.get_user_by_id(root.user_id).role == "admin"


def test_update_user_rejects_taken_username(db):
    make_user(db, "root", role="admin")
    ed = make_user(db, "ed")
    manager = UserManager(db)

    with pytest.raises(UserAlreadyExistsError):
        manager.update_user(ed.user_id, username="root")

    renamed = manager.update_user(ed.user_id, username="eddie", name="Eddie")
    assert renamed.username == "eddie"
    assert renamed.name == "Eddie"


def test_change_password(db):
    ed = make_user(db, "ed")
    manager = UserManager(db)

    with pytest.raises(ValidationError):
        manager.change_password(ed.user_id, "no")
    manager.change_password(ed.user_id, "brand-new", actor="ed")

    assert manager.authenticate("ed", "brand-new") is not None
    with pytest.raises(NotFoundError):
        manager.change_password("missing", "brand-new")


def test_ensure_default_admin(db, monkeypatch):
    manager = UserManager(db)
    monkeypatch.setattr(config, "DEFAULT_ADMIN_PASSWORD", None)
    assert manager.ensure_default_admin() is None

    monkeypatch.setattr(config, "DEFAULT_ADMIN_PASSWORD", "bootstrap")
    seeded = manager.ensure_default_admin()
    assert seeded.role == "admin"
    assert seeded.username == config.DEFAULT_ADMIN_USERNAME

    assert manager.ensure_default_admin() is None
