"""Notice management utilities, including attached documents."""

import logging
import time
from pathlib import PurePosixPath
from typing import List, Optional

from sqlalchemy.orm import Session

from course_portal import config
from course_portal.core.exceptions import NotFoundError, ValidationError
from course_portal.models.notice import NoticeModel
from course_portal.schemas.notice import Notice
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.file_store import FileStore
from course_portal.utils.store import commit, generate_id

logger = logging.getLogger(__name__)


class NoticeManager:
    """Manages notices and the documents attached to them."""

    def __init__(
        self,
        db: Session,
        audit: Optional[AuditLogManager] = None,
        file_store: Optional[FileStore] = None,
    ):
        self.db = db
        self.audit = audit or AuditLogManager(db)
        self.file_store = file_store or FileStore()

    def list_notices(self) -> List[NoticeModel]:
        """Notices, newest date first."""
        return (
            self.db.query(NoticeModel)
            .order_by(NoticeModel.date.desc(), NoticeModel.notice_id.desc())
            .all()
        )

    def get_notice(self, notice_id: str) -> NoticeModel:
        model = (
            self.db.query(NoticeModel).filter(NoticeModel.notice_id == notice_id).first()
        )
        if not model:
            raise NotFoundError("Notice", notice_id)
        return model

    def save_notice(self, notice: Notice, actor: Optional[str] = None) -> NoticeModel:
        """Create a notice, or update the one named by ``notice.notice_id``.

        Raises:
            ValidationError: If ``pdf_path`` points outside the notices namespace.
            NotFoundError: If ``notice_id`` is given but unknown.
        """
        if notice.pdf_path and not self.file_store.within(
            notice.pdf_path, config.NOTICES_DIR_NAME
        ):
            raise ValidationError(
                "Notice documents must be uploaded through the notice upload endpoint."
            )
        fields = notice.model_dump(exclude={"notice_id"})

        if notice.notice_id:
            model = self.get_notice(notice.notice_id)
            for name, value in fields.items():
                setattr(model, name, value)
            action = "UPDATE_NOTICE"
        else:
            model = NoticeModel(notice_id=generate_id("notice"), **fields)
            self.db.add(model)
            action = "CREATE_NOTICE"
        commit(self.db, "save notice")
        self.db.refresh(model)

        logger.info("Saved notice %s", model.notice_id)
        verb = "Created" if action == "CREATE_NOTICE" else "Updated"
        self.audit.append(action, actor, f"{verb} notice: {notice.title}")
        return model

    def store_document(
        self, filename: str, content: bytes, actor: Optional[str] = None
    ) -> str:
        """Store a notice attachment under a generated name.

        Returns:
            The store-relative path to put in a notice's ``pdf_path``.
        """
        suffix = PurePosixPath(filename).suffix.lower() or ".pdf"
        stored_name = f"notice-{int(time.time() * 1000)}{suffix}"
        relative_path = self.file_store.save(
            config.NOTICES_DIR_NAME, stored_name, content
        )
        self.audit.append(
            "UPLOAD_NOTICE_DOCUMENT", actor, f"Uploaded notice document {filename}"
        )
        return relative_path

    def delete_notice(self, notice_id: str, actor: Optional[str] = None) -> None:
        """Delete a notice and its attached document, if any.

        Raises:
            NotFoundError: If the notice does not exist.
        """
        model = self.get_notice(notice_id)
        title, pdf_path = model.title, model.pdf_path
        self.db.delete(model)
        commit(self.db, "delete notice")
        logger.info("Deleted notice %s", notice_id)

        if pdf_path:
            self.file_store.delete(pdf_path)
        if actor is not None:
            self.audit.append("DELETE_NOTICE", actor, f"Deleted notice: {title}")

    def referenced_paths(self) -> List[str]:
        return [
            row.pdf_path
            for row in self.db.query(NoticeModel.pdf_path)
            if row.pdf_path
        ]
