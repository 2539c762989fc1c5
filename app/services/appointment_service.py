import logging
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.timezone import (
    TimeZone,
    ZoneLike,
    current_month_bounds,
    current_week_bounds,
    to_storage,
    utc_now,
)
from app.models.appointment import Appointment, AppointmentCreate, AppointmentRecord, AppointmentUpdate

logger = logging.getLogger(__name__)


async def list_appointments(session: AsyncSession) -> list[Appointment]:
    result = await session.execute(select(AppointmentRecord).order_by(AppointmentRecord.start, AppointmentRecord.id))
    return [Appointment.from_record(r) for r in result.scalars().all()]


async def list_appointments_between(
    session: AsyncSession, start_inclusive: datetime, end_exclusive: datetime
) -> list[Appointment]:
    """Appointments whose start falls in ``[start_inclusive, end_exclusive)`` (UTC)."""
    result = await session.execute(
        select(AppointmentRecord)
        .where(
            AppointmentRecord.start >= to_storage(start_inclusive),
            AppointmentRecord.start < to_storage(end_exclusive),
        )
        .order_by(AppointmentRecord.start, AppointmentRecord.id)
    )
    return [Appointment.from_record(r) for r in result.scalars().all()]


async def list_appointments_for_customer(session: AsyncSession, customer_id: int) -> list[Appointment]:
    result = await session.execute(
        select(AppointmentRecord)
        .where(AppointmentRecord.customer_id == customer_id)
        .order_by(AppointmentRecord.start, AppointmentRecord.id)
    )
    return [Appointment.from_record(r) for r in result.scalars().all()]


async def get_appointment(session: AsyncSession, appointment_id: int) -> Appointment | None:
    record = await session.get(AppointmentRecord, appointment_id)
    return Appointment.from_record(record) if record else None


async def create_appointment(session: AsyncSession, data: AppointmentCreate, username: str) -> Appointment:
    now = utc_now()
    appointment = Appointment(
        **data.model_dump(),
        create_date=now,
        created_by=username,
        last_update=now,
        last_updated_by=username,
    )
    record = appointment.to_record()
    session.add(record)
    await session.flush()
    await session.refresh(record)
    logger.info("Appointment %d created by %s", record.id, username)
    return Appointment.from_record(record)


async def update_appointment(
    session: AsyncSession, appointment_id: int, data: AppointmentUpdate, username: str
) -> Appointment | None:
    record = await session.get(AppointmentRecord, appointment_id)
    if not record:
        return None
    updated = Appointment.from_record(record).with_changes(username, **data.model_dump())
    for column, value in updated.storage_values().items():
        setattr(record, column, value)
    await session.flush()
    logger.info("Appointment %d updated by %s", appointment_id, username)
    return updated


async def delete_appointment(session: AsyncSession, appointment_id: int) -> bool:
    record = await session.get(AppointmentRecord, appointment_id)
    if not record:
        return False
    await session.delete(record)
    await session.flush()
    logger.info("Appointment %d deleted", appointment_id)
    return True


async def delete_appointments_for_customer(session: AsyncSession, customer_id: int) -> int:
    result = await session.execute(delete(AppointmentRecord).where(AppointmentRecord.customer_id == customer_id))
    await session.flush()
    return result.rowcount or 0


class AppointmentManager:
    """Appointment lookups bound to one session, in the shape the table view consumes.

    "Current" week and month are evaluated against the clock at call time, in
    ``zone`` (the display zone unless told otherwise).
    """

    def __init__(self, session: AsyncSession, zone: ZoneLike = TimeZone.LOCAL, week_starts_on: str | None = None):
        self.session = session
        self.zone = zone
        self.week_starts_on = week_starts_on

    async def get_all(self) -> list[Appointment]:
        return await list_appointments(self.session)

    async def get(self, appointment_id: int) -> Appointment | None:
        return await get_appointment(self.session, appointment_id)

    async def get_appointments_for_current_week(self, now: datetime | None = None) -> list[Appointment]:
        start, end = current_week_bounds(now, self.zone, self.week_starts_on)
        return await list_appointments_between(self.session, start, end)

    async def get_appointments_for_current_month(self, now: datetime | None = None) -> list[Appointment]:
        start, end = current_month_bounds(now, self.zone)
        return await list_appointments_between(self.session, start, end)
