from datetime import datetime
from typing import ClassVar, Protocol

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from app.core.timezone import normalize_to_reference_zone, to_storage
from app.models.base import UNASSIGNED_ID, ImmutableRecord


class DivisionDirectory(Protocol):
    def get_country_id_for_division(self, division_id: int) -> int: ...

    def get_country_name(self, country_id: int) -> str: ...

    def get_division_name(self, division_id: int) -> str: ...


class CustomerRecord(SQLModel, table=True):
    __tablename__ = "customers"
    id: int | None = Field(default=None, primary_key=True)
    name: str
    address: str
    postal_code: str
    phone: str
    create_date: datetime  # naive UTC
    created_by: str
    last_update: datetime  # naive UTC
    last_updated_by: str
    division_id: int = Field(foreign_key="first_level_divisions.id", index=True)


class Customer(ImmutableRecord):
    """A customer as the rest of the application sees it.

    Audit timestamps are relabeled as UTC on construction (wall clock kept,
    zone replaced). Country and division names come from a ``DivisionDirectory``.
    """

    id_field: ClassVar[str] = "customer_id"

    customer_id: int = UNASSIGNED_ID
    customer_name: str
    address: str
    postal_code: str
    phone: str
    create_date: datetime
    created_by: str
    last_update: datetime
    last_updated_by: str
    division_id: int

    @field_validator("create_date", "last_update")
    @classmethod
    def _relabel_utc(cls, v: datetime) -> datetime:
        return normalize_to_reference_zone(v)

    def country_id(self, directory: DivisionDirectory) -> int:
        return directory.get_country_id_for_division(self.division_id)

    def country_name(self, directory: DivisionDirectory) -> str:
        return directory.get_country_name(self.country_id(directory))

    def division_name(self, directory: DivisionDirectory) -> str:
        return directory.get_division_name(self.division_id)

    @classmethod
    def from_record(cls, record: CustomerRecord) -> "Customer":
        return cls(
            customer_id=record.id if record.id is not None else UNASSIGNED_ID,
            customer_name=record.name,
            address=record.address,
            postal_code=record.postal_code,
            phone=record.phone,
            create_date=record.create_date,
            created_by=record.created_by,
            last_update=record.last_update,
            last_updated_by=record.last_updated_by,
            division_id=record.division_id,
        )

    def storage_values(self) -> dict:
        """Column values for CustomerRecord, without the primary key."""
        return {
            "name": self.customer_name,
            "address": self.address,
            "postal_code": self.postal_code,
            "phone": self.phone,
            "create_date": to_storage(self.create_date),
            "created_by": self.created_by,
            "last_update": to_storage(self.last_update),
            "last_updated_by": self.last_updated_by,
            "division_id": self.division_id,
        }

    def to_record(self) -> CustomerRecord:
        record = CustomerRecord(**self.storage_values())
        if self.is_persisted:
            record.id = self.customer_id
        return record


class CustomerCreate(SQLModel):
    customer_name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    division_id: int


class CustomerUpdate(CustomerCreate):
    pass


class CustomerPublic(SQLModel):
    customer_id: int
    customer_name: str
    address: str
    postal_code: str
    phone: str
    division_id: int
    division_name: str
    country_id: int
    country_name: str
    create_date: datetime
    created_by: str
    last_update: datetime
    last_updated_by: str
