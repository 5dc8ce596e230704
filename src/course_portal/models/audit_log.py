from sqlalchemy import Column, Integer, String, Text
from .base import Base


class AuditLogModel(Base):
    __tablename__ = "audit_logs"

    # Insertion sequence breaks ties between entries sharing a timestamp
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)  # "log-<ms>-<n>"
    date = Column(String, nullable=False, index=True)  # ISO format string
    action = Column(String, nullable=False)
    username = Column(String, nullable=False, default="Unknown")
    details = Column(Text, default="")
