from typing import Any

from pydantic import BaseModel

from app.views.appointment_view import AppointmentFilter


class ColumnInfo(BaseModel):
    header: str
    field: str
    width: int
    resizable: bool
    reorderable: bool


class AppointmentTable(BaseModel):
    filter: AppointmentFilter
    columns: list[ColumnInfo]
    rows: list[dict[str, Any]]
