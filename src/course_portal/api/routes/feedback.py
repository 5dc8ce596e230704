"""Public feedback routes.

Anyone may submit; reading and deleting need the matching ``*_view``
capability.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from course_portal.api.routes.auth import get_auth_context
from course_portal.core.dependencies import FeedbackManagerDep
from course_portal.core.permissions import AuthContext
from course_portal.schemas.feedback import (
    Complaint,
    ComplaintRequest,
    Message,
    MessageRequest,
    Opinion,
    OpinionRequest,
)
from course_portal.utils.converters import (
    complaint_to_schema,
    message_to_schema,
    opinion_to_schema,
)

router = APIRouter(prefix="/api", tags=["Feedback"])


@router.post(
    "/messages",
    response_model=Message,
    status_code=status.HTTP_201_CREATED,
    summary="Send contact message",
)
def submit_message(req: MessageRequest, feedback_manager: FeedbackManagerDep) -> Message:
    return message_to_schema(feedback_manager.submit_message(req))


@router.get("/messages", response_model=List[Message], summary="List messages")
def list_messages(
    feedback_manager: FeedbackManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> List[Message]:
    ctx.require("message")
    return [message_to_schema(m) for m in feedback_manager.list_messages()]


@router.delete("/messages/{message_id}", summary="Delete message")
def delete_message(
    message_id: str,
    feedback_manager: FeedbackManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    ctx.require("message")
    feedback_manager.delete_message(message_id, actor=ctx.username)
    return {"success": True, "message": "Message deleted"}


@router.post(
    "/complaints",
    response_model=Complaint,
    status_code=status.HTTP_201_CREATED,
    summary="File complaint",
)
def submit_complaint(
    req: ComplaintRequest, feedback_manager: FeedbackManagerDep
) -> Complaint:
    return complaint_to_schema(feedback_manager.submit_complaint(req))


@router.get("/complaints", response_model=List[Complaint], summary="List complaints")
def list_complaints(
    feedback_manager: FeedbackManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> List[Complaint]:
    ctx.require("complaint")
    return [complaint_to_schema(m) for m in feedback_manager.list_complaints()]


@router.delete("/complaints/{complaint_id}", summary="Delete complaint")
def delete_complaint(
    complaint_id: str,
    feedback_manager: FeedbackManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    ctx.require("complaint")
    feedback_manager.delete_complaint(complaint_id, actor=ctx.username)
    return {"success": True, "message": "Complaint deleted"}


@router.post(
    "/opinions",
    response_model=Opinion,
    status_code=status.HTTP_201_CREATED,
    summary="Share opinion",
)
def submit_opinion(req: OpinionRequest, feedback_manager: FeedbackManagerDep) -> Opinion:
    return opinion_to_schema(feedback_manager.submit_opinion(req))


@router.get("/opinions", response_model=List[Opinion], summary="List opinions")
def list_opinions(
    feedback_manager: FeedbackManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> List[Opinion]:
    ctx.require("opinion")
    return [opinion_to_schema(m) for m in feedback_manager.list_opinions()]


@router.delete("/opinions/{opinion_id}", summary="Delete opinion")
def delete_opinion(
    opinion_id: str,
    feedback_manager: FeedbackManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    ctx.require("opinion")
    feedback_manager.delete_opinion(opinion_id, actor=ctx.username)
    return {"success": True, "message": "Opinion deleted"}
