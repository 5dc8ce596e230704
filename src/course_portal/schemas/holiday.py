from typing import Optional

from pydantic import BaseModel


class Holiday(BaseModel):
    holiday_id: str
    date: str
    title: str
    holiday_type: str = "custom"
    is_cancelled: bool = False
    note: str = ""


class CreateHolidayRequest(BaseModel):
    date: str
    title: str
    note: str = ""


class UpdateHolidayRequest(BaseModel):
    is_cancelled: Optional[bool] = None
    note: Optional[str] = None
