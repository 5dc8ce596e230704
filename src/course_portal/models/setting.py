from sqlalchemy import Column, JSON, String
from .base import Base


class SettingModel(Base):
    """One site setting; the settings document is the union of all rows."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=True)
