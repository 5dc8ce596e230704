"""Schemas for public feedback intake."""

from pydantic import BaseModel, Field


class MessageRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+$")
    subject: str = ""
    message: str = Field(min_length=1)


class Message(MessageRequest):
    message_id: str
    date: str


class ComplaintRequest(BaseModel):
    subject: str = Field(min_length=1)
    department: str = ""
    description: str = Field(min_length=1)
    anonymous: bool = False


class Complaint(ComplaintRequest):
    complaint_id: str
    date: str


class OpinionRequest(BaseModel):
    rating: int = Field(ge=1, le=5)
    feedback: str = ""


class Opinion(OpinionRequest):
    opinion_id: str
    date: str
