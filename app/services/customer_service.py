import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.timezone import utc_now
from app.models.customer import Customer, CustomerCreate, CustomerRecord, CustomerUpdate
from app.services.appointment_service import delete_appointments_for_customer

logger = logging.getLogger(__name__)


async def list_customers(session: AsyncSession) -> list[Customer]:
    result = await session.execute(select(CustomerRecord).order_by(CustomerRecord.id))
    return [Customer.from_record(r) for r in result.scalars().all()]


async def get_customer(session: AsyncSession, customer_id: int) -> Customer | None:
    record = await session.get(CustomerRecord, customer_id)
    return Customer.from_record(record) if record else None


async def create_customer(session: AsyncSession, data: CustomerCreate, username: str) -> Customer:
    now = utc_now()
    customer = Customer(
        **data.model_dump(),
        create_date=now,
        created_by=username,
        last_update=now,
        last_updated_by=username,
    )
    record = customer.to_record()
    session.add(record)
    await session.flush()
    await session.refresh(record)
    logger.info("Customer %d created by %s", record.id, username)
    return Customer.from_record(record)


async def update_customer(
    session: AsyncSession, customer_id: int, data: CustomerUpdate, username: str
) -> Customer | None:
    record = await session.get(CustomerRecord, customer_id)
    if not record:
        return None
    updated = Customer.from_record(record).with_changes(username, **data.model_dump())
    for column, value in updated.storage_values().items():
        setattr(record, column, value)
    await session.flush()
    logger.info("Customer %d updated by %s", customer_id, username)
    return updated


async def delete_customer(session: AsyncSession, customer_id: int) -> int | None:
    """Delete a customer and their appointments.

    Returns the number of appointments removed with the customer, or None if
    the customer does not exist.
    """
    record = await session.get(CustomerRecord, customer_id)
    if not record:
        return None
    removed = await delete_appointments_for_customer(session, customer_id)
    await session.delete(record)
    await session.flush()
    logger.info("Customer %d deleted along with %d appointment(s)", customer_id, removed)
    return removed
