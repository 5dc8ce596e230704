"""Weekly schedule routes."""

import time
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile

from course_portal.api.deferrable import delete_or_request
from course_portal.api.routes.auth import get_auth_context
from course_portal.core.dependencies import (
    DeletionRequestManagerDep,
    ScheduleManagerDep,
)
from course_portal.core.permissions import AuthContext
from course_portal.schemas.schedule import CancelClassRequest, ScheduleEntry
from course_portal.utils.converters import schedule_to_schema

router = APIRouter(prefix="/api/schedule", tags=["Schedule"])


@router.get("", response_model=List[ScheduleEntry], summary="List schedule")
def list_schedule(schedule_manager: ScheduleManagerDep) -> List[ScheduleEntry]:
    return [schedule_to_schema(m) for m in schedule_manager.list_entries()]


@router.post("", response_model=ScheduleEntry, summary="Create or update entry")
def save_entry(
    entry: ScheduleEntry,
    schedule_manager: ScheduleManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> ScheduleEntry:
    ctx.require("schedule")
    return schedule_to_schema(schedule_manager.save_entry(entry, actor=ctx.username))


@router.post("/routine", summary="Replace routine image")
def upload_routine(
    schedule_manager: ScheduleManagerDep,
    file: UploadFile = File(..., description="Routine image"),
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    """Overwrite the routine image.

    The timestamp lets clients bust their cached copy.
    """
    ctx.require("schedule")
    path = schedule_manager.store_routine_image(file.file.read(), actor=ctx.username)
    return {"success": True, "timestamp": int(time.time() * 1000), "path": path}


@router.put(
    "/{entry_id}/cancel", response_model=ScheduleEntry, summary="Cancel or restore class"
)
def set_cancelled(
    entry_id: str,
    req: CancelClassRequest,
    schedule_manager: ScheduleManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> ScheduleEntry:
    ctx.require("schedule_cancellation")
    model = schedule_manager.set_cancelled(entry_id, req.is_cancelled, actor=ctx.username)
    return schedule_to_schema(model)


@router.delete("/{entry_id}", summary="Delete entry")
def delete_entry(
    entry_id: str,
    schedule_manager: ScheduleManagerDep,
    requests: DeletionRequestManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
):
    entry = schedule_manager.get_entry(entry_id)
    return delete_or_request(
        ctx,
        requests,
        "schedule",
        entry_id,
        lambda: schedule_manager.delete_entry(entry_id, actor=ctx.username),
        details={"courseName": entry.course_name, "day": entry.day},
    )
