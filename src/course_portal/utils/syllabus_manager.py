"""Syllabus management utilities."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from course_portal import config
from course_portal.core.exceptions import NotFoundError, ValidationError
from course_portal.models.syllabus_entry import SyllabusEntryModel
from course_portal.schemas.syllabus import SyllabusEntry
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.file_store import FileStore
from course_portal.utils.store import commit

logger = logging.getLogger(__name__)


class SyllabusManager:
    """Manages syllabus entries keyed by course code, and the syllabus PDFs."""

    def __init__(
        self,
        db: Session,
        audit: Optional[AuditLogManager] = None,
        file_store: Optional[FileStore] = None,
    ):
        self.db = db
        self.audit = audit or AuditLogManager(db)
        self.file_store = file_store or FileStore()

    def list_entries(self) -> List[SyllabusEntryModel]:
        return self.db.query(SyllabusEntryModel).order_by(SyllabusEntryModel.code).all()

    def get_entry(self, code: str) -> SyllabusEntryModel:
        model = (
            self.db.query(SyllabusEntryModel)
            .filter(SyllabusEntryModel.code == code)
            .first()
        )
        if not model:
            raise NotFoundError("Syllabus entry", code)
        return model

    def save_entry(
        self, entry: SyllabusEntry, actor: Optional[str] = None
    ) -> SyllabusEntryModel:
        """Insert the entry, or replace the fields of the one with the same code."""
        model = (
            self.db.query(SyllabusEntryModel)
            .filter(SyllabusEntryModel.code == entry.code)
            .first()
        )
        fields = entry.model_dump(exclude={"code"})
        if model is None:
            model = SyllabusEntryModel(code=entry.code, **fields)
            self.db.add(model)
        else:
            for name, value in fields.items():
                setattr(model, name, value)
        commit(self.db, "save syllabus entry")
        self.db.refresh(model)

        logger.info("Saved syllabus entry %s", entry.code)
        self.audit.append(
            "UPDATE_SYLLABUS", actor, f"Saved syllabus {entry.code}: {entry.title}"
        )
        return model

    def delete_entry(self, code: str, actor: Optional[str] = None) -> None:
        """Delete the entry with this course code.

        Raises:
            NotFoundError: If no entry has this code.
        """
        model = self.get_entry(code)
        self.db.delete(model)
        commit(self.db, "delete syllabus entry")
        logger.info("Deleted syllabus entry %s", code)
        if actor is not None:
            self.audit.append("DELETE_SYLLABUS", actor, f"Deleted syllabus {code}")

    def store_pdf(
        self, content: bytes, variant: Optional[str] = None, actor: Optional[str] = None
    ) -> str:
        """Replace a syllabus PDF.

        Args:
            content: The uploaded PDF.
            variant: "4-1" replaces the 4-1 term syllabus; anything else the main one.
            actor: Username recorded in the audit log.

        Returns:
            The store-relative path of the replaced document.
        """
        if not content:
            raise ValidationError("No file uploaded")
        names = config.SYLLABUS_PDF_NAMES
        filename = names.get(variant or "default", names["default"])
        relative_path = self.file_store.save(config.SYLLABUS_DIR_NAME, filename, content)
        logger.info("Replaced syllabus document %s", relative_path)
        self.audit.append("UPLOAD_SYLLABUS_PDF", actor, f"Uploaded {filename}")
        return relative_path
