"""Site settings storage."""

import copy
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from course_portal import config
from course_portal.core.exceptions import ValidationError
from course_portal.models.setting import SettingModel
from course_portal.utils.audit_logger import AuditLogManager
from course_portal.utils.store import commit

logger = logging.getLogger(__name__)

SCHEDULE_VIEWS = ("week", "day")


class SettingsManager:
    """Reads and partially updates the settings document."""

    def __init__(self, db: Session, audit: Optional[AuditLogManager] = None):
        self.db = db
        self.audit = audit or AuditLogManager(db)

    def get_settings(self) -> Dict[str, Any]:
        """Stored values merged over the defaults."""
        settings = copy.deepcopy(config.DEFAULT_SETTINGS)
        for row in self.db.query(SettingModel).all():
            settings[row.key] = row.value
        return settings

    def update_settings(
        self, changes: Dict[str, Any], actor: Optional[str] = None
    ) -> Dict[str, Any]:
        """Store the given keys; keys not in ``changes`` are left unchanged.

        Raises:
            ValidationError: On an unknown key or an invalid schedule view.
        """
        unknown = sorted(set(changes) - set(config.DEFAULT_SETTINGS))
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(unknown)}")
        view = changes.get("defaultScheduleView")
        if view is not None and view not in SCHEDULE_VIEWS:
            raise ValidationError(f"Invalid schedule view: {view}")
        if not changes:
            return self.get_settings()

        for key, value in changes.items():
            row = self.db.query(SettingModel).filter(SettingModel.key == key).first()
            if row is None:
                self.db.add(SettingModel(key=key, value=value))
            else:
                row.value = value
        commit(self.db, "update settings")

        keys = ", ".join(sorted(changes))
        logger.info("Updated settings: %s", keys)
        self.audit.append("UPDATE_SETTINGS", actor, f"Updated settings: {keys}")
        return self.get_settings()
