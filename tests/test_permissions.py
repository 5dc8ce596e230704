import pytest

from course_portal.core.exceptions import PermissionDeniedError
from course_portal.core.permissions import (
    AuthContext,
    Capability,
    can_mutate,
    capability_for,
    default_permissions,
    has_permission,
    normalize_permissions,
)
from course_portal.schemas.user import User


def _user(role="editor", **permissions):
    return User(username=f"u-{role}", password_hash="x", role=role, permissions=permissions)


class TestHasPermission:
    def test_absent_user_has_nothing(self):
        for cap in Capability:
            assert has_permission(None, cap) is False

    def test_admin_has_every_capability_including_unknown(self):
        admin = _user(role="admin")
        for cap in Capability:
            assert has_permission(admin, cap) is True
        assert has_permission(admin, "not_a_real_capability") is True

    def test_editor_holds_exactly_true_entries(self):
        editor = _user(courses_edit=True, syllabus_edit=False)
        assert has_permission(editor, Capability.COURSES_EDIT) is True
        assert has_permission(editor, "courses_edit") is True
        assert has_permission(editor, Capability.SYLLABUS_EDIT) is False
        assert has_permission(editor, Capability.NOTICES_EDIT) is False

    @pytest.mark.parametrize("value", ["true", 1, "yes", [True], {"x": 1}])
    def test_non_boolean_truthy_values_are_not_grants(self, value):
        editor = _user()
        editor.permissions["courses_edit"] = value
        assert has_permission(editor, Capability.COURSES_EDIT) is False

    def test_closure_over_all_capabilities(self):
        granted = {Capability.EXAMS_EDIT.value, Capability.MESSAGES_VIEW.value}
        editor = _user(**{name: True for name in granted})
        for cap in Capability:
            assert has_permission(editor, cap) is (cap.value in granted)


class TestResourceCapabilities:
    def test_file_accepts_materials_or_courses(self):
        assert can_mutate(_user(course_materials_edit=True), "file")
        assert can_mutate(_user(courses_edit=True), "file")
        assert not can_mutate(_user(exams_edit=True), "file")

    def test_cancellation_accepts_either_capability(self):
        assert can_mutate(_user(class_cancellation_edit=True), "schedule_cancellation")
        assert can_mutate(_user(schedule_edit=True), "schedule_cancellation")
        assert not can_mutate(_user(class_cancellation_edit=True), "schedule")

    def test_unknown_resource_needs_admin(self):
        assert capability_for("widget") == ()
        assert not can_mutate(_user(courses_edit=True), "widget")
        assert can_mutate(_user(role="admin"), "widget")


def test_default_permissions_are_all_off():
    defaults = default_permissions()
    assert set(defaults) == {cap.value for cap in Capability}
    assert not any(defaults.values())


def test_normalize_drops_unknown_names_and_non_booleans():
    raw = {"courses_edit": True, "notices_edit": "true", "launch_rockets": True}
    assert normalize_permissions(raw) == {"courses_edit": True}


class TestAuthContext:
    def test_require_raises_without_capability(self):
        ctx = AuthContext(_user())
        with pytest.raises(PermissionDeniedError):
            ctx.require("course")

    def test_require_admin(self):
        AuthContext(_user(role="admin")).require_admin()
        with pytest.raises(PermissionDeniedError):
            AuthContext(_user(courses_edit=True)).require_admin()

    def test_anonymous_context(self):
        ctx = AuthContext(None)
        assert not ctx.is_authenticated
        assert ctx.username == "Unknown"
        assert not ctx.has_permission(Capability.COURSES_EDIT)
