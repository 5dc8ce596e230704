"""Public feedback intake: contact messages, complaints and opinions.

Submissions are public and unaudited; listing and deletion are gated by the
``*_view`` capabilities at the route layer.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from course_portal.core.exceptions import NotFoundError
from course_portal.models.feedback import ComplaintModel, MessageModel, OpinionModel
from course_portal.schemas.feedback import (
    ComplaintRequest,
    MessageRequest,
    OpinionRequest,
)
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.store import commit, generate_id, utc_now_iso

logger = logging.getLogger(__name__)


class FeedbackManager:
    """Manages the three feedback collections."""

    def __init__(self, db: Session, audit: Optional[AuditLogManager] = None):
        self.db = db
        self.audit = audit or AuditLogManager(db)

    # --- Messages ---

    def submit_message(self, req: MessageRequest) -> MessageModel:
        model = MessageModel(
            message_id=generate_id("msg"), date=utc_now_iso(), **req.model_dump()
        )
        self.db.add(model)
        commit(self.db, "submit message")
        logger.info("Received message %s", model.message_id)
        return model

    def list_messages(self) -> List[MessageModel]:
        return self.db.query(MessageModel).order_by(MessageModel.date.desc()).all()

    def delete_message(self, message_id: str, actor: Optional[str] = None) -> None:
        model = (
            self.db.query(MessageModel)
            .filter(MessageModel.message_id == message_id)
            .first()
        )
        if not model:
            raise NotFoundError("Message", message_id)
        self.db.delete(model)
        commit(self.db, "delete message")
        logger.info("Deleted message %s", message_id)
        self.audit.append("DELETE_MESSAGE", actor, f"Deleted message {message_id}")

    # --- Complaints ---

    def submit_complaint(self, req: ComplaintRequest) -> ComplaintModel:
        model = ComplaintModel(
            complaint_id=generate_id("cmp"), date=utc_now_iso(), **req.model_dump()
        )
        self.db.add(model)
        commit(self.db, "submit complaint")
        logger.info("Received complaint %s", model.complaint_id)
        return model

    def list_complaints(self) -> List[ComplaintModel]:
        return self.db.query(ComplaintModel).order_by(ComplaintModel.date.desc()).all()

    def delete_complaint(self, complaint_id: str, actor: Optional[str] = None) -> None:
        model = (
            self.db.query(ComplaintModel)
            .filter(ComplaintModel.complaint_id == complaint_id)
            .first()
        )
        if not model:
            raise NotFoundError("Complaint", complaint_id)
        self.db.delete(model)
        commit(self.db, "delete complaint")
        logger.info("Deleted complaint %s", complaint_id)
        self.audit.append(
            "DELETE_COMPLAINT", actor, f"Deleted complaint {complaint_id}"
        )

    # --- Opinions ---

    def submit_opinion(self, req: OpinionRequest) -> OpinionModel:
        model = OpinionModel(
            opinion_id=generate_id("op"), date=utc_now_iso(), **req.model_dump()
        )
        self.db.add(model)
        commit(self.db, "submit opinion")
        logger.info("Received opinion %s (rating %d)", model.opinion_id, req.rating)
        return model

    def list_opinions(self) -> List[OpinionModel]:
        return self.db.query(OpinionModel).order_by(OpinionModel.date.desc()).all()

    def delete_opinion(self, opinion_id: str, actor: Optional[str] = None) -> None:
        model = (
            self.db.query(OpinionModel)
            .filter(OpinionModel.opinion_id == opinion_id)
            .first()
        )
        if not model:
            raise NotFoundError("Opinion", opinion_id)
        self.db.delete(model)
        commit(self.db, "delete opinion")
        logger.info("Deleted opinion %s", opinion_id)
        self.audit.append("DELETE_OPINION", actor, f"Deleted opinion {opinion_id}")
