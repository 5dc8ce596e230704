"""Identity and permission model.

Users carry a role (``admin`` or ``editor``) and a sparse map of capability
names to booleans. Admins implicitly hold every capability; editors hold
exactly the capabilities mapped to ``True``.
"""

from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Union

from course_portal.core.exceptions import PermissionDeniedError
from course_portal.schemas.user import ROLE_ADMIN, User


class Capability(str, Enum):
    """Named boolean permission bits grantable to editors."""

    COURSES_EDIT = "courses_edit"
    SYLLABUS_EDIT = "syllabus_edit"
    SCHEDULE_EDIT = "schedule_edit"
    NOTICES_EDIT = "notices_edit"
    DELETION_REQUESTS_EDIT = "deletion_requests_edit"
    WELCOME_MESSAGE_EDIT = "welcome_message_edit"
    EXAMS_EDIT = "exams_edit"
    COURSE_MATERIALS_EDIT = "course_materials_edit"
    BREAKING_NEWS_EDIT = "breaking_news_edit"
    CLASS_CANCELLATION_EDIT = "class_cancellation_edit"
    MESSAGES_VIEW = "messages_view"
    COMPLAINTS_VIEW = "complaints_view"
    OPINIONS_VIEW = "opinions_view"


# Capabilities granting direct mutation of each resource type. Any one suffices.
RESOURCE_CAPABILITIES: Dict[str, Tuple[Capability, ...]] = {
    "course": (Capability.COURSES_EDIT,),
    "file": (Capability.COURSE_MATERIALS_EDIT, Capability.COURSES_EDIT),
    "exam": (Capability.EXAMS_EDIT,),
    "schedule": (Capability.SCHEDULE_EDIT,),
    "schedule_cancellation": (
        Capability.CLASS_CANCELLATION_EDIT,
        Capability.SCHEDULE_EDIT,
    ),
    "syllabus": (Capability.SYLLABUS_EDIT,),
    "notice": (Capability.NOTICES_EDIT,),
    "holiday": (Capability.SCHEDULE_EDIT,),
    "message": (Capability.MESSAGES_VIEW,),
    "complaint": (Capability.COMPLAINTS_VIEW,),
    "opinion": (Capability.OPINIONS_VIEW,),
}

# Site settings keys and the capability that may change each
SETTING_CAPABILITIES: Dict[str, Capability] = {
    "welcomeMessage": Capability.WELCOME_MESSAGE_EDIT,
    "breakingNews": Capability.BREAKING_NEWS_EDIT,
    "visibleDays": Capability.SCHEDULE_EDIT,
    "defaultScheduleView": Capability.SCHEDULE_EDIT,
    "routineSwitchTime": Capability.SCHEDULE_EDIT,
}


def has_permission(
    user: Optional[User], capability: Union[Capability, str]
) -> bool:
    """Check whether a user holds a capability.

    Args:
        user: The acting user, or None when unauthenticated.
        capability: Capability to check. Unrecognized names are allowed.

    Returns:
        True for admins, True for editors whose permission map holds exactly
        ``True`` for the name, False otherwise.
    """
    if user is None:
        return False
    if user.role == ROLE_ADMIN:
        return True
    name = capability.value if isinstance(capability, Capability) else capability
    return (user.permissions or {}).get(name) is True


def capability_for(resource_type: str) -> Tuple[Capability, ...]:
    """Capabilities that allow direct mutation of a resource type."""
    return RESOURCE_CAPABILITIES.get(resource_type, ())


def can_mutate(user: Optional[User], resource_type: str) -> bool:
    """Whether ``user`` may create, update or delete ``resource_type`` directly."""
    if user is not None and user.role == ROLE_ADMIN:
        return True
    return any(has_permission(user, cap) for cap in capability_for(resource_type))


def default_permissions() -> Dict[str, bool]:
    """Permission map of a fresh editor: every capability off."""
    return {cap.value: False for cap in Capability}


def normalize_permissions(raw: Mapping[str, object]) -> Dict[str, bool]:
    """Keep only known capability names with boolean values."""
    known = {cap.value for cap in Capability}
    return {
        name: value
        for name, value in raw.items()
        if name in known and isinstance(value, bool)
    }


class AuthContext:
    """The authenticated caller of one request and its permission queries."""

    def __init__(self, user: Optional[User]):
        self.user = user

    @property
    def username(self) -> str:
        return self.user.username if self.user else "Unknown"

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == ROLE_ADMIN

    def has_permission(self, capability: Union[Capability, str]) -> bool:
        return has_permission(self.user, capability)

    def can_mutate(self, resource_type: str) -> bool:
        return can_mutate(self.user, resource_type)

    def require(self, resource_type: str) -> None:
        """Raise unless the caller may mutate ``resource_type`` directly.

        Raises:
            PermissionDeniedError: If no granting capability is held.
        """
        if not self.can_mutate(resource_type):
            raise PermissionDeniedError(
                f"Missing permission to modify {resource_type} resources."
            )

    def require_capability(self, capability: Capability) -> None:
        if not self.has_permission(capability):
            raise PermissionDeniedError(f"Missing permission '{capability.value}'.")

    def require_admin(self) -> None:
        if not self.is_admin:
            raise PermissionDeniedError("Admin privileges required.")
