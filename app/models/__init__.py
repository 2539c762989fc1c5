from app.models.base import UNASSIGNED_ID, ImmutableRecord
from app.models.user import User, UserCreate, UserPublic
from app.models.contact import Contact, ContactPublic
from app.models.location import Country, CountryPublic, DivisionPublic, FirstLevelDivision
from app.models.customer import Customer, CustomerCreate, CustomerPublic, CustomerRecord, CustomerUpdate
from app.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentRecord,
    AppointmentUpdate,
)

__all__ = [
    "UNASSIGNED_ID",
    "ImmutableRecord",
    "User",
    "UserCreate",
    "UserPublic",
    "Contact",
    "ContactPublic",
    "Country",
    "CountryPublic",
    "DivisionPublic",
    "FirstLevelDivision",
    "Customer",
    "CustomerCreate",
    "CustomerPublic",
    "CustomerRecord",
    "CustomerUpdate",
    "Appointment",
    "AppointmentCreate",
    "AppointmentPublic",
    "AppointmentRecord",
    "AppointmentUpdate",
]
