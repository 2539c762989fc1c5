import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_reference_directory, get_session
from app.api.schemas.customer import CustomerDeleted
from app.models.customer import Customer, CustomerCreate, CustomerPublic, CustomerUpdate
from app.models.user import User
from app.services.customer_service import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)
from app.services.lookup_service import ReferenceDirectory

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/customers", tags=["customers"])


def _to_public(c: Customer, directory: ReferenceDirectory) -> CustomerPublic:
    return CustomerPublic(
        customer_id=c.customer_id,
        customer_name=c.customer_name,
        address=c.address,
        postal_code=c.postal_code,
        phone=c.phone,
        division_id=c.division_id,
        division_name=c.division_name(directory),
        country_id=c.country_id(directory),
        country_name=c.country_name(directory),
        create_date=c.create_date,
        created_by=c.created_by,
        last_update=c.last_update,
        last_updated_by=c.last_updated_by,
    )


def _check_division(data: CustomerCreate, directory: ReferenceDirectory) -> None:
    if not directory.has_division(data.division_id):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown division {data.division_id}",
        )


@router.get("", response_model=list[CustomerPublic])
async def read_customers(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    directory: ReferenceDirectory = Depends(get_reference_directory),
) -> list[CustomerPublic]:
    customers = await list_customers(session)
    return [_to_public(c, directory) for c in customers]


@router.get("/{customer_id}", response_model=CustomerPublic)
async def read_customer(
    customer_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    directory: ReferenceDirectory = Depends(get_reference_directory),
) -> CustomerPublic:
    customer = await get_customer(session, customer_id)
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return _to_public(customer, directory)


@router.post("", response_model=CustomerPublic, status_code=status.HTTP_201_CREATED)
async def add_customer(
    body: CustomerCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    directory: ReferenceDirectory = Depends(get_reference_directory),
) -> CustomerPublic:
    _check_division(body, directory)
    customer = await create_customer(session, body, current_user.username)
    return _to_public(customer, directory)


@router.put("/{customer_id}", response_model=CustomerPublic)
async def modify_customer(
    customer_id: int,
    body: CustomerUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    directory: ReferenceDirectory = Depends(get_reference_directory),
) -> CustomerPublic:
    _check_division(body, directory)
    customer = await update_customer(session, customer_id, body, current_user.username)
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return _to_public(customer, directory)


@router.delete("/{customer_id}", response_model=CustomerDeleted)
async def remove_customer(
    customer_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CustomerDeleted:
    removed = await delete_customer(session, customer_id)
    if removed is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return CustomerDeleted(customer_id=customer_id, appointments_deleted=removed)
