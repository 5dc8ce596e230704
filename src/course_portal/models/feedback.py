"""Public feedback intake models: contact messages, complaints, opinions."""

from sqlalchemy import Boolean, Column, Integer, String, Text
from .base import Base


class MessageModel(Base):
    __tablename__ = "messages"

    message_id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    subject = Column(String, nullable=True)
    message = Column(Text, nullable=False)
    date = Column(String, nullable=False, index=True)


class ComplaintModel(Base):
    __tablename__ = "complaints"

    complaint_id = Column(String, primary_key=True, index=True)
    subject = Column(String, nullable=False)
    department = Column(String, nullable=True)
    description = Column(Text, nullable=False)
    anonymous = Column(Boolean, default=False, nullable=False)
    date = Column(String, nullable=False, index=True)


class OpinionModel(Base):
    __tablename__ = "opinions"

    opinion_id = Column(String, primary_key=True, index=True)
    rating = Column(Integer, nullable=False)
    feedback = Column(Text, default="")
    date = Column(String, nullable=False, index=True)
