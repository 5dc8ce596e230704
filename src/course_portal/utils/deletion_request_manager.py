"""Deletion request workflow.

Editors without the capability to delete a resource file a deletion request
instead. An admin approves it, which dispatches to the handler registered for
the request's type, or rejects it.

Handlers are registered with ``@register_deletion_handler("<type>")`` and
receive the manager plus the request; each extracts its own identifiers.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from course_portal.core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from course_portal.models.deletion_request import DeletionRequestModel
from course_portal.schemas.moderation import DeletionRequest
from course_portal.schemas.user import User
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.converters import deletion_request_to_schema
from course_portal.utils.course_manager import CourseManager
from course_portal.utils.file_store import FileStore
from course_portal.utils.notice_manager import NoticeManager
from course_portal.utils.schedule_manager import ScheduleManager
from course_portal.utils.store import commit, generate_id, utc_now_iso
from course_portal.utils.syllabus_manager import SyllabusManager

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"

DeletionHandler = Callable[["DeletionRequestManager", DeletionRequestModel], None]

_HANDLERS: Dict[str, DeletionHandler] = {}


def register_deletion_handler(resource_type: str):
    """Register the function performing approved deletions of ``resource_type``."""

    def decorator(func: DeletionHandler) -> DeletionHandler:
        _HANDLERS[resource_type] = func
        return func

    return decorator


def _require_course_id(request: DeletionRequestModel) -> str:
    course_id = (request.details or {}).get("courseId")
    if not course_id:
        raise ValidationError(
            f"Deletion request {request.id} for a {request.type} is missing courseId."
        )
    return str(course_id)


@register_deletion_handler("course")
def _delete_course(manager: "DeletionRequestManager", request: DeletionRequestModel):
    manager.courses.delete_course(request.resource_id)


@register_deletion_handler("file")
def _delete_file(manager: "DeletionRequestManager", request: DeletionRequestModel):
    manager.courses.delete_file(_require_course_id(request), request.resource_id)


@register_deletion_handler("exam")
def _delete_exam(manager: "DeletionRequestManager", request: DeletionRequestModel):
    manager.courses.delete_exam(_require_course_id(request), request.resource_id)


@register_deletion_handler("schedule")
def _delete_schedule(manager: "DeletionRequestManager", request: DeletionRequestModel):
    manager.schedule.delete_entry(request.resource_id)


@register_deletion_handler("syllabus")
def _delete_syllabus(manager: "DeletionRequestManager", request: DeletionRequestModel):
    manager.syllabus.delete_entry(request.resource_id)


@register_deletion_handler("notice")
def _delete_notice(manager: "DeletionRequestManager", request: DeletionRequestModel):
    manager.notices.delete_notice(request.resource_id)


def supported_types() -> List[str]:
    """Resource types an approval can delete."""
    return sorted(_HANDLERS)


class DeletionRequestManager:
    """Stores deletion requests and carries out admin decisions."""

    def __init__(
        self,
        db: Session,
        audit: Optional[AuditLogManager] = None,
        file_store: Optional[FileStore] = None,
    ):
        self.db = db
        self.audit = audit or AuditLogManager(db)
        self.file_store = file_store or FileStore()
        self.courses = CourseManager(db, self.audit, self.file_store)
        self.schedule = ScheduleManager(db, self.audit, self.file_store)
        self.syllabus = SyllabusManager(db, self.audit, self.file_store)
        self.notices = NoticeManager(db, self.audit, self.file_store)

    def submit_request(
        self,
        resource_type: str,
        resource_id: str,
        details: Optional[Dict[str, Any]],
        requested_by: str,
    ) -> DeletionRequestModel:
        """Record a pending request. Any type is accepted; it is checked on approval.

        No audit entry is written.
        """
        request = DeletionRequestModel(
            id=generate_id("req"),
            type=resource_type,
            resource_id=resource_id,
            details=dict(details or {}),
            requested_by=requested_by,
            date=utc_now_iso(),
            status=STATUS_PENDING,
        )
        self.db.add(request)
        commit(self.db, "submit deletion request")
        self.db.refresh(request)
        logger.info(
            "Deletion request %s filed by %s for %s %s",
            request.id,
            requested_by,
            resource_type,
            resource_id,
        )
        return request

    def list_requests(self, status: str = STATUS_PENDING) -> List[DeletionRequestModel]:
        """Requests with ``status``, oldest first."""
        return (
            self.db.query(DeletionRequestModel)
            .filter(DeletionRequestModel.status == status)
            .order_by(DeletionRequestModel.date, DeletionRequestModel.id)
            .all()
        )

    def get_request(self, request_id: str) -> DeletionRequestModel:
        request = (
            self.db.query(DeletionRequestModel)
            .filter(DeletionRequestModel.id == request_id)
            .first()
        )
        if request is None:
            raise NotFoundError("Request", request_id)
        return request

    @staticmethod
    def _require_admin(user: Optional[User]) -> None:
        if user is None or not user.is_admin:
            raise PermissionDeniedError("Only admins can decide deletion requests.")

    def approve_request(self, request_id: str, approving_user: User) -> DeletionRequest:
        """Perform the requested deletion, then remove the request.

        The request stays pending when the type is unknown, required details
        are missing, or the handler fails.

        Args:
            request_id: Id of the pending request.
            approving_user: Acting user; must be an admin.

        Returns:
            A snapshot of the removed request.

        Raises:
            PermissionDeniedError: If ``approving_user`` is not an admin.
            NotFoundError: If the request or its target does not exist.
            ValidationError: If the type is unsupported or details are missing.
            StoreFailureError: If the store rejects the deletion.
        """
        self._require_admin(approving_user)
        request = self.get_request(request_id)

        handler = _HANDLERS.get(request.type)
        if handler is None:
            raise ValidationError(f"Unsupported deletion type: {request.type}")

        handler(self, request)

        snapshot = deletion_request_to_schema(request)
        resource_type, resource_id, requested_by = (
            snapshot.type,
            snapshot.resource_id,
            snapshot.requested_by,
        )
        self.db.delete(request)
        commit(self.db, "remove approved deletion request")
        logger.info(
            "Approved deletion request %s (%s %s) by %s",
            request_id,
            resource_type,
            resource_id,
            approving_user.username,
        )
        self.audit.append(
            "APPROVE_DELETION",
            approving_user.username,
            f"Approved deletion of {resource_type} {resource_id} "
            f"requested by {requested_by}",
        )
        return snapshot

    def reject_request(self, request_id: str, acting_user: User) -> None:
        """Discard a request without touching its target.

        Raises:
            PermissionDeniedError: If ``acting_user`` is not an admin.
            NotFoundError: If the request does not exist.
        """
        self._require_admin(acting_user)
        request = self.get_request(request_id)
        resource_type, resource_id, requested_by = (
            request.type,
            request.resource_id,
            request.requested_by,
        )
        self.db.delete(request)
        commit(self.db, "reject deletion request")
        logger.info("Rejected deletion request %s", request_id)
        self.audit.append(
            "REJECT_DELETION",
            acting_user.username,
            f"Rejected deletion of {resource_type} {resource_id} "
            f"requested by {requested_by}",
        )
