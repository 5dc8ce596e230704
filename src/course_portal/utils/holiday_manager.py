"""Holiday calendar management utilities."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from course_portal.core.exceptions import NotFoundError, ValidationError
from course_portal.models.holiday import HolidayModel
from course_portal.schemas.holiday import CreateHolidayRequest, UpdateHolidayRequest
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.store import commit, generate_id

logger = logging.getLogger(__name__)


class HolidayManager:
    def __init__(self, db: Session, audit: Optional[AuditLogManager] = None):
        self.db = db
        self.audit = audit or AuditLogManager(db)

    def list_holidays(self) -> List[HolidayModel]:
        return (
            self.db.query(HolidayModel)
            .order_by(HolidayModel.date, HolidayModel.holiday_id)
            .all()
        )

    def get_holiday(self, holiday_id: str) -> HolidayModel:
        model = (
            self.db.query(HolidayModel)
            .filter(HolidayModel.holiday_id == holiday_id)
            .first()
        )
        if not model:
            raise NotFoundError("Holiday", holiday_id)
        return model

    def create_holiday(
        self, req: CreateHolidayRequest, actor: Optional[str] = None
    ) -> HolidayModel:
        if not req.date or not req.title:
            raise ValidationError("Date and title are required.")
        model = HolidayModel(
            holiday_id=generate_id("holiday"),
            date=req.date,
            title=req.title,
            holiday_type="custom",
            is_cancelled=False,
            note=req.note or "",
        )
        self.db.add(model)
        commit(self.db, "create holiday")
        self.db.refresh(model)
        logger.info("Created holiday %s on %s", model.holiday_id, req.date)
        self.audit.append(
            "CREATE_HOLIDAY", actor, f"Added holiday {req.title} on {req.date}"
        )
        return model

    def update_holiday(
        self, holiday_id: str, req: UpdateHolidayRequest, actor: Optional[str] = None
    ) -> HolidayModel:
        """Toggle the cancelled flag or change the note; omitted fields stay."""
        model = self.get_holiday(holiday_id)
        if req.is_cancelled is not None:
            model.is_cancelled = req.is_cancelled
        if req.note is not None:
            model.note = req.note
        commit(self.db, "update holiday")
        self.db.refresh(model)
        logger.info("Updated holiday %s", holiday_id)
        self.audit.append("UPDATE_HOLIDAY", actor, f"Updated holiday {model.title}")
        return model

    def delete_holiday(self, holiday_id: str, actor: Optional[str] = None) -> None:
        model = self.get_holiday(holiday_id)
        title = model.title
        self.db.delete(model)
        commit(self.db, "delete holiday")
        logger.info("Deleted holiday %s", holiday_id)
        self.audit.append("DELETE_HOLIDAY", actor, f"Deleted holiday {title}")
