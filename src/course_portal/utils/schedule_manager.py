"""Weekly schedule management utilities."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from course_portal import config
from course_portal.core.exceptions import NotFoundError, ValidationError
from course_portal.models.schedule_entry import ScheduleEntryModel
from course_portal.schemas.schedule import RECURRENCES, WEEK_DAYS, ScheduleEntry
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.file_store import FileStore
from course_portal.utils.store import commit, generate_id

logger = logging.getLogger(__name__)


def _day_index(day: str) -> int:
    return WEEK_DAYS.index(day) if day in WEEK_DAYS else len(WEEK_DAYS)


class ScheduleManager:
    """Manages timetable entries and the published routine image."""

    def __init__(
        self,
        db: Session,
        audit: Optional[AuditLogManager] = None,
        file_store: Optional[FileStore] = None,
    ):
        self.db = db
        self.audit = audit or AuditLogManager(db)
        self.file_store = file_store or FileStore()

    def list_entries(self) -> List[ScheduleEntryModel]:
        """Entries ordered by week day, then start time."""
        models = self.db.query(ScheduleEntryModel).all()
        return sorted(models, key=lambda m: (_day_index(m.day), m.start_time))

    def get_entry(self, entry_id: str) -> ScheduleEntryModel:
        model = (
            self.db.query(ScheduleEntryModel)
            .filter(ScheduleEntryModel.entry_id == entry_id)
            .first()
        )
        if not model:
            raise NotFoundError("Schedule entry", entry_id)
        return model

    def _validate(self, entry: ScheduleEntry) -> None:
        if entry.day not in WEEK_DAYS:
            raise ValidationError(f"Invalid day: {entry.day}")
        if entry.recurrence not in RECURRENCES:
            raise ValidationError(
                f"Invalid recurrence: {entry.recurrence}. "
                f"Must be one of {', '.join(RECURRENCES)}."
            )
        # Zero-padded HH:MM compares correctly as text
        if entry.start_time >= entry.end_time:
            raise ValidationError("Start time must be before end time.")

    def save_entry(
        self, entry: ScheduleEntry, actor: Optional[str] = None
    ) -> ScheduleEntryModel:
        """Create an entry, or update the one named by ``entry.entry_id``.

        Raises:
            ValidationError: If the day, recurrence or time range is invalid.
            NotFoundError: If ``entry_id`` is given but unknown.
        """
        self._validate(entry)
        fields = entry.model_dump(exclude={"entry_id"})

        if entry.entry_id:
            model = self.get_entry(entry.entry_id)
            for name, value in fields.items():
                setattr(model, name, value)
        else:
            model = ScheduleEntryModel(entry_id=generate_id("class"), **fields)
            self.db.add(model)
        commit(self.db, "save schedule entry")
        self.db.refresh(model)

        label = entry.course_name or entry.course_id or entry.entry_type
        logger.info("Saved schedule entry %s (%s)", model.entry_id, label)
        self.audit.append(
            "UPDATE_SCHEDULE",
            actor,
            f"Saved {label} on {entry.day} {entry.start_time}-{entry.end_time}",
        )
        return model

    def set_cancelled(
        self, entry_id: str, is_cancelled: bool, actor: Optional[str] = None
    ) -> ScheduleEntryModel:
        """Mark one entry cancelled or restore it."""
        model = self.get_entry(entry_id)
        model.is_cancelled = is_cancelled
        commit(self.db, "update class cancellation")
        self.db.refresh(model)

        state = "Cancelled" if is_cancelled else "Restored"
        logger.info("%s schedule entry %s", state, entry_id)
        self.audit.append(
            "UPDATE_SCHEDULE",
            actor,
            f"{state} class {model.course_name or entry_id} on {model.day}",
        )
        return model

    def delete_entry(self, entry_id: str, actor: Optional[str] = None) -> None:
        """Delete one entry.

        Raises:
            NotFoundError: If the entry does not exist.
        """
        model = self.get_entry(entry_id)
        label = model.course_name or entry_id
        self.db.delete(model)
        commit(self.db, "delete schedule entry")
        logger.info("Deleted schedule entry %s", entry_id)
        if actor is not None:
            self.audit.append(
                "DELETE_SCHEDULE", actor, f"Deleted schedule entry {label}"
            )

    def store_routine_image(self, content: bytes, actor: Optional[str] = None) -> str:
        """Overwrite the routine image and return its store-relative path."""
        if not content:
            raise ValidationError("No file uploaded")
        relative_path = self.file_store.save(
            config.ROUTINE_DIR_NAME, config.ROUTINE_IMAGE_NAME, content
        )
        logger.info("Replaced routine image (%d bytes)", len(content))
        self.audit.append("UPLOAD_ROUTINE", actor, "Uploaded routine image")
        return relative_path
