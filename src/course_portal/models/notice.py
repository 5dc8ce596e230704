from sqlalchemy import Column, Integer, String, Text
from .base import Base


class NoticeModel(Base):
    __tablename__ = "notices"

    notice_id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    date = Column(String, nullable=False, index=True)
    valid_until = Column(String, nullable=True)
    category = Column(String, default="General")
    description = Column(Text, default="")
    content = Column(Text, default="")
    pdf_path = Column(String, nullable=True)  # relative to UPLOADS_DIR
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}
