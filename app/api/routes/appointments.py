import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_appointment_manager,
    get_current_user,
    get_display_zone,
    get_reference_directory,
    get_session,
)
from app.api.schemas.appointment import AppointmentTable, ColumnInfo
from app.core.timezone import ZoneLike
from app.models.appointment import Appointment, AppointmentCreate, AppointmentPublic, AppointmentUpdate
from app.models.user import User
from app.services.appointment_service import (
    AppointmentManager,
    create_appointment,
    delete_appointment,
    get_appointment,
    update_appointment,
)
from app.services.lookup_service import ReferenceDirectory
from app.views.appointment_view import AppointmentFilter, AppointmentView

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])


def _to_public(a: Appointment, directory: ReferenceDirectory, zone: ZoneLike) -> AppointmentPublic:
    return AppointmentPublic(
        appointment_id=a.appointment_id,
        title=a.title,
        description=a.description,
        location=a.location,
        type=a.type,
        start=a.start,
        end=a.end,
        start_display=a.start_display(zone),
        end_display=a.end_display(zone),
        customer_id=a.customer_id,
        customer_name=a.customer_name(directory),
        user_id=a.user_id,
        user_name=a.user_name(directory),
        contact_id=a.contact_id,
        contact_name=a.contact_name(directory),
        create_date=a.create_date,
        created_by=a.created_by,
        last_update=a.last_update,
        last_updated_by=a.last_updated_by,
    )


def _check_references(data: AppointmentCreate, directory: ReferenceDirectory) -> None:
    missing = []
    if not directory.has_customer(data.customer_id):
        missing.append(f"customer {data.customer_id}")
    if not directory.has_user(data.user_id):
        missing.append(f"user {data.user_id}")
    if not directory.has_contact(data.contact_id):
        missing.append(f"contact {data.contact_id}")
    if missing:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown {', '.join(missing)}",
        )


@router.get("", response_model=AppointmentTable)
async def list_appointments_table(
    filter_param: AppointmentFilter = Query(AppointmentFilter.ALL, alias="filter"),
    current_user: User = Depends(get_current_user),
    manager: AppointmentManager = Depends(get_appointment_manager),
    directory: ReferenceDirectory = Depends(get_reference_directory),
    zone: ZoneLike = Depends(get_display_zone),
) -> AppointmentTable:
    """Appointment table for the Week / Month / All filter, rendered for display."""
    view = await AppointmentView.open(manager, directory, zone, initial=filter_param)
    return AppointmentTable(
        filter=view.filter,
        columns=[ColumnInfo(**c._asdict()) for c in view.columns],
        rows=view.rows(),
    )


@router.get("/{appointment_id}", response_model=AppointmentPublic)
async def read_appointment(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    directory: ReferenceDirectory = Depends(get_reference_directory),
    zone: ZoneLike = Depends(get_display_zone),
) -> AppointmentPublic:
    appointment = await get_appointment(session, appointment_id)
    if not appointment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    return _to_public(appointment, directory, zone)


@router.post("", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def add_appointment(
    body: AppointmentCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    directory: ReferenceDirectory = Depends(get_reference_directory),
    zone: ZoneLike = Depends(get_display_zone),
) -> AppointmentPublic:
    _check_references(body, directory)
    appointment = await create_appointment(session, body, current_user.username)
    return _to_public(appointment, directory, zone)


@router.put("/{appointment_id}", response_model=AppointmentPublic)
async def modify_appointment(
    appointment_id: int,
    body: AppointmentUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    directory: ReferenceDirectory = Depends(get_reference_directory),
    zone: ZoneLike = Depends(get_display_zone),
) -> AppointmentPublic:
    if not await get_appointment(session, appointment_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    _check_references(body, directory)
    appointment = await update_appointment(session, appointment_id, body, current_user.username)
    if not appointment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    return _to_public(appointment, directory, zone)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_appointment(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> None:
    ok = await delete_appointment(session, appointment_id)
    if not ok:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
