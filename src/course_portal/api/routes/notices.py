"""Notice routes."""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile

from course_portal.api.deferrable import delete_or_request
from course_portal.api.routes.auth import get_auth_context
from course_portal.core.dependencies import (
    DeletionRequestManagerDep,
    NoticeManagerDep,
)
from course_portal.core.permissions import AuthContext
from course_portal.schemas.notice import Notice
from course_portal.utils.converters import notice_to_schema

router = APIRouter(prefix="/api/notices", tags=["Notice"])


@router.get("", response_model=List[Notice], summary="List notices")
def list_notices(notice_manager: NoticeManagerDep) -> List[Notice]:
    return [notice_to_schema(m) for m in notice_manager.list_notices()]


@router.post("", response_model=Notice, summary="Create or update notice")
def save_notice(
    notice: Notice,
    notice_manager: NoticeManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> Notice:
    ctx.require("notice")
    return notice_to_schema(notice_manager.save_notice(notice, actor=ctx.username))


@router.post("/upload", summary="Upload notice document")
def upload_document(
    notice_manager: NoticeManagerDep,
    file: UploadFile = File(...),
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    """Store an attachment and return the path to set as a notice's ``pdf_path``."""
    ctx.require("notice")
    path = notice_manager.store_document(
        file.filename or "document.pdf", file.file.read(), actor=ctx.username
    )
    return {"success": True, "path": path}


@router.delete("/{notice_id}", summary="Delete notice")
def delete_notice(
    notice_id: str,
    notice_manager: NoticeManagerDep,
    requests: DeletionRequestManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
):
    notice = notice_manager.get_notice(notice_id)
    return delete_or_request(
        ctx,
        requests,
        "notice",
        notice_id,
        lambda: notice_manager.delete_notice(notice_id, actor=ctx.username),
        details={"title": notice.title},
    )
