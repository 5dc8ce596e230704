"""Holiday calendar routes."""

from typing import List

from fastapi import APIRouter, Depends

from course_portal.api.routes.auth import get_auth_context
from course_portal.core.dependencies import HolidayManagerDep
from course_portal.core.permissions import AuthContext
from course_portal.schemas.holiday import (
    CreateHolidayRequest,
    Holiday,
    UpdateHolidayRequest,
)
from course_portal.utils.converters import holiday_to_schema

router = APIRouter(prefix="/api/holidays", tags=["Holiday"])


@router.get("", response_model=List[Holiday], summary="List holidays")
def list_holidays(holiday_manager: HolidayManagerDep) -> List[Holiday]:
    return [holiday_to_schema(m) for m in holiday_manager.list_holidays()]


@router.post("", response_model=Holiday, summary="Add holiday")
def create_holiday(
    req: CreateHolidayRequest,
    holiday_manager: HolidayManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> Holiday:
    ctx.require("holiday")
    return holiday_to_schema(holiday_manager.create_holiday(req, actor=ctx.username))


@router.put("/{holiday_id}", response_model=Holiday, summary="Update holiday")
def update_holiday(
    holiday_id: str,
    req: UpdateHolidayRequest,
    holiday_manager: HolidayManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> Holiday:
    ctx.require("holiday")
    model = holiday_manager.update_holiday(holiday_id, req, actor=ctx.username)
    return holiday_to_schema(model)


@router.delete("/{holiday_id}", summary="Delete holiday")
def delete_holiday(
    holiday_id: str,
    holiday_manager: HolidayManagerDep,
    ctx: AuthContext = Depends(get_auth_context),
) -> dict:
    ctx.require("holiday")
    holiday_manager.delete_holiday(holiday_id, actor=ctx.username)
    return {"success": True, "message": "Holiday deleted"}
