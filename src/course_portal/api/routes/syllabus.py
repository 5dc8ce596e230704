"""Syllabus routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from course_portal.api.deferrable import delete_or_request
from course_portal.api.routes.auth import get_auth_context
from course_portal.core.dependencies import (
    DeletionRequestManagerDep,
    SyllabusManagerDep,
)
from course_portal.core.permissions import AuthContext
from course_portal.schemas.syllabus import SyllabusEntry
from course_portal.utils.converters import syllabus_to_schema

router = APIRouter(prefix="/api/syllabus", tags=["Syllabus"])


@router.get("", response_model=List[SyllabusEntry], summary="List syllabus")
def list_syllabus(syllabus_manager: SyllabusManagerDep) -> List[SyllabusEntry]:
    return [syllabus_to_schema(m) for m in syllabus_manager.list_entries()]


@router.post("", response_model=SyllabusEntry, summary="Create or update entry")
def save_entry(
    entry: SyllabusEntry,
    syllabus_manager: SyllabusManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> SyllabusEntry:
    ctx.require("syllabus")
    return syllabus_to_schema(syllabus_manager.save_entry(entry, actor=ctx.username))


@router.post("/pdf", summary="Replace syllabus PDF")
def upload_pdf(
    syllabus_manager: SyllabusManagerDep,
    file: UploadFile = File(..., description="Syllabus PDF"),
    variant: Optional[str] = Query(
        None, alias="type", description='"4-1" replaces the 4-1 term syllabus'
    ),
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    ctx.require("syllabus")
    path = syllabus_manager.store_pdf(file.file.read(), variant, actor=ctx.username)
    return {"success": True, "message": "Syllabus PDF updated successfully", "path": path}


@router.delete("/{code}", summary="Delete entry")
def delete_entry(
    code: str,
    syllabus_manager: SyllabusManagerDep,
    requests: DeletionRequestManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
):
    entry = syllabus_manager.get_entry(code)
    return delete_or_request(
        ctx,
        requests,
        "syllabus",
        code,
        lambda: syllabus_manager.delete_entry(code, actor=ctx.username),
        details={"title": entry.title},
    )
