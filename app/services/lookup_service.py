import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.contact import Contact
from app.models.customer import CustomerRecord
from app.models.location import Country, FirstLevelDivision
from app.models.user import User

logger = logging.getLogger(__name__)


class UnknownReferenceError(LookupError):
    """A foreign key did not resolve to a known record."""

    def __init__(self, kind: str, record_id: int) -> None:
        super().__init__(f"Unknown {kind} id: {record_id}")
        self.kind = kind
        self.record_id = record_id


class ReferenceDirectory:
    """In-memory name lookups for customers, contacts, users, countries and divisions.

    Built once per unit of work with ``await ReferenceDirectory.load(session)``
    and passed to whatever needs to turn an id into a display name. Getters are
    synchronous and raise ``UnknownReferenceError`` for ids they do not know.
    """

    def __init__(
        self,
        customers: dict[int, str] | None = None,
        contacts: dict[int, Contact] | None = None,
        users: dict[int, str] | None = None,
        countries: dict[int, str] | None = None,
        divisions: dict[int, FirstLevelDivision] | None = None,
    ) -> None:
        self._customers = dict(customers or {})
        self._contacts = dict(contacts or {})
        self._users = dict(users or {})
        self._countries = dict(countries or {})
        self._divisions = dict(divisions or {})

    @classmethod
    async def load(cls, session: AsyncSession) -> "ReferenceDirectory":
        customers = await session.execute(select(CustomerRecord.id, CustomerRecord.name))
        contacts = await session.execute(select(Contact))
        users = await session.execute(select(User.id, User.username))
        countries = await session.execute(select(Country.id, Country.name))
        divisions = await session.execute(select(FirstLevelDivision))
        directory = cls(
            customers={cid: name for cid, name in customers.all()},
            contacts={c.id: c for c in contacts.scalars().all()},
            users={uid: username for uid, username in users.all()},
            countries={cid: name for cid, name in countries.all()},
            divisions={d.id: d for d in divisions.scalars().all()},
        )
        logger.debug(
            "Reference data loaded: %d customers, %d contacts, %d users, %d countries, %d divisions",
            len(directory._customers),
            len(directory._contacts),
            len(directory._users),
            len(directory._countries),
            len(directory._divisions),
        )
        return directory

    @staticmethod
    def _resolve(table: dict, kind: str, record_id: int):
        try:
            return table[record_id]
        except KeyError:
            raise UnknownReferenceError(kind, record_id) from None

    def get_customer_name(self, customer_id: int) -> str:
        return self._resolve(self._customers, "customer", customer_id)

    def get_contact_name(self, contact_id: int) -> str:
        return self._resolve(self._contacts, "contact", contact_id).name

    def get_user_name(self, user_id: int) -> str:
        return self._resolve(self._users, "user", user_id)

    def get_country_id_for_division(self, division_id: int) -> int:
        return self._resolve(self._divisions, "division", division_id).country_id

    def get_country_name(self, country_id: int) -> str:
        return self._resolve(self._countries, "country", country_id)

    def get_division_name(self, division_id: int) -> str:
        return self._resolve(self._divisions, "division", division_id).name

    def has_customer(self, customer_id: int) -> bool:
        return customer_id in self._customers

    def has_contact(self, contact_id: int) -> bool:
        return contact_id in self._contacts

    def has_user(self, user_id: int) -> bool:
        return user_id in self._users

    def has_division(self, division_id: int) -> bool:
        return division_id in self._divisions

    def contacts(self) -> list[Contact]:
        return sorted(self._contacts.values(), key=lambda c: c.name)

    def countries(self) -> list[tuple[int, str]]:
        return sorted(self._countries.items(), key=lambda item: item[1])

    def divisions(self, country_id: int | None = None) -> list[FirstLevelDivision]:
        divisions = self._divisions.values()
        if country_id is not None:
            divisions = [d for d in divisions if d.country_id == country_id]
        return sorted(divisions, key=lambda d: d.name)
