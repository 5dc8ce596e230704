from typing import List, Optional

from pydantic import BaseModel


class SiteSettings(BaseModel):
    """Site-wide settings. On update, omitted fields are left unchanged."""

    visibleDays: Optional[List[str]] = None
    welcomeMessage: Optional[str] = None
    breakingNews: Optional[str] = None
    defaultScheduleView: Optional[str] = None
    routineSwitchTime: Optional[str] = None
