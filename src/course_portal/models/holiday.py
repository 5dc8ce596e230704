from sqlalchemy import Boolean, Column, Integer, String
from .base import Base


class HolidayModel(Base):
    __tablename__ = "holidays"

    holiday_id = Column(String, primary_key=True, index=True)
    date = Column(String, nullable=False, index=True)  # ISO date
    title = Column(String, nullable=False)
    holiday_type = Column(String, default="custom")
    is_cancelled = Column(Boolean, default=False, nullable=False)
    note = Column(String, default="")
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}
