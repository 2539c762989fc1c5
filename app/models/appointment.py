from datetime import date, datetime, time
from typing import ClassVar, Protocol

from pydantic import field_validator, model_validator
from sqlmodel import Field, SQLModel

from app.core.timezone import (
    TimeZone,
    ZoneLike,
    convert_time,
    normalize_to_reference_zone,
    to_display_string,
    to_storage,
    to_time_string,
)
from app.models.base import UNASSIGNED_ID, ImmutableRecord


class AppointmentDirectory(Protocol):
    def get_customer_name(self, customer_id: int) -> str: ...

    def get_contact_name(self, contact_id: int) -> str: ...

    def get_user_name(self, user_id: int) -> str: ...


class AppointmentRecord(SQLModel, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    title: str
    description: str
    location: str
    type: str
    start: datetime = Field(index=True)  # naive UTC
    end: datetime  # naive UTC
    create_date: datetime
    created_by: str
    last_update: datetime
    last_updated_by: str
    customer_id: int = Field(foreign_key="customers.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    contact_id: int = Field(foreign_key="contacts.id", index=True)


class Appointment(ImmutableRecord):
    """A single appointment.

    ``start``, ``end``, ``create_date`` and ``last_update`` are relabeled as UTC
    when the record is built: the wall-clock fields are kept as given and the
    zone is replaced, no conversion takes place. The ``local_*`` and
    ``*_display`` accessors do a real conversion into the display zone.
    """

    id_field: ClassVar[str] = "appointment_id"

    appointment_id: int = UNASSIGNED_ID
    title: str
    description: str
    location: str
    type: str
    start: datetime
    end: datetime
    create_date: datetime
    created_by: str
    last_update: datetime
    last_updated_by: str
    customer_id: int
    user_id: int
    contact_id: int

    @field_validator("start", "end", "create_date", "last_update")
    @classmethod
    def _relabel_utc(cls, v: datetime) -> datetime:
        return normalize_to_reference_zone(v)

    def local_start(self, zone: ZoneLike = TimeZone.LOCAL) -> datetime:
        return convert_time(self.start, zone)

    def local_start_date(self, zone: ZoneLike = TimeZone.LOCAL) -> date:
        return self.local_start(zone).date()

    def local_start_time(self, zone: ZoneLike = TimeZone.LOCAL) -> time:
        return self.local_start(zone).time()

    def local_start_string(self, zone: ZoneLike = TimeZone.LOCAL) -> str:
        return to_time_string(self.local_start(zone))

    def start_display(self, zone: ZoneLike = TimeZone.LOCAL) -> str:
        return to_display_string(self.local_start(zone))

    def local_end(self, zone: ZoneLike = TimeZone.LOCAL) -> datetime:
        return convert_time(self.end, zone)

    def local_end_date(self, zone: ZoneLike = TimeZone.LOCAL) -> date:
        return self.local_end(zone).date()

    def local_end_time(self, zone: ZoneLike = TimeZone.LOCAL) -> time:
        return self.local_end(zone).time()

    def local_end_string(self, zone: ZoneLike = TimeZone.LOCAL) -> str:
        return to_time_string(self.local_end(zone))

    def end_display(self, zone: ZoneLike = TimeZone.LOCAL) -> str:
        return to_display_string(self.local_end(zone))

    def customer_name(self, directory: AppointmentDirectory) -> str:
        return directory.get_customer_name(self.customer_id)

    def contact_name(self, directory: AppointmentDirectory) -> str:
        return directory.get_contact_name(self.contact_id)

    def user_name(self, directory: AppointmentDirectory) -> str:
        return directory.get_user_name(self.user_id)

    @classmethod
    def from_record(cls, record: AppointmentRecord) -> "Appointment":
        return cls(
            appointment_id=record.id if record.id is not None else UNASSIGNED_ID,
            title=record.title,
            description=record.description,
            location=record.location,
            type=record.type,
            start=record.start,
            end=record.end,
            create_date=record.create_date,
            created_by=record.created_by,
            last_update=record.last_update,
            last_updated_by=record.last_updated_by,
            customer_id=record.customer_id,
            user_id=record.user_id,
            contact_id=record.contact_id,
        )

    def storage_values(self) -> dict:
        """Column values for AppointmentRecord, without the primary key."""
        return {
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "type": self.type,
            "start": to_storage(self.start),
            "end": to_storage(self.end),
            "create_date": to_storage(self.create_date),
            "created_by": self.created_by,
            "last_update": to_storage(self.last_update),
            "last_updated_by": self.last_updated_by,
            "customer_id": self.customer_id,
            "user_id": self.user_id,
            "contact_id": self.contact_id,
        }

    def to_record(self) -> AppointmentRecord:
        record = AppointmentRecord(**self.storage_values())
        if self.is_persisted:
            record.id = self.appointment_id
        return record


class AppointmentCreate(SQLModel):
    title: str = Field(min_length=1)
    description: str
    location: str
    type: str = Field(min_length=1)
    start: datetime
    end: datetime
    customer_id: int
    user_id: int
    contact_id: int

    @model_validator(mode="after")
    def _end_after_start(self) -> "AppointmentCreate":
        if normalize_to_reference_zone(self.end) <= normalize_to_reference_zone(self.start):
            raise ValueError("end must be after start")
        return self


class AppointmentUpdate(AppointmentCreate):
    pass


class AppointmentPublic(SQLModel):
    appointment_id: int
    title: str
    description: str
    location: str
    type: str
    start: datetime
    end: datetime
    start_display: str
    end_display: str
    customer_id: int
    customer_name: str
    user_id: int
    user_name: str
    contact_id: int
    contact_name: str
    create_date: datetime
    created_by: str
    last_update: datetime
    last_updated_by: str
