"""Filterable appointment table.

The table shows one filter at a time (Week, Month or All, starting on All).
Changing the filter re-fetches from the appointment source and swaps in the new
collection; nothing is filtered client-side.
"""
import enum
import logging
from typing import Any, NamedTuple, Protocol

from app.core.timezone import TimeZone, ZoneLike
from app.models.appointment import Appointment, AppointmentDirectory

logger = logging.getLogger(__name__)


class AppointmentFilter(str, enum.Enum):
    WEEK = "Week"
    MONTH = "Month"
    ALL = "All"


class UnknownFilterError(ValueError):
    pass


class AppointmentSource(Protocol):
    async def get_appointments_for_current_week(self) -> list[Appointment]: ...

    async def get_appointments_for_current_month(self) -> list[Appointment]: ...

    async def get_all(self) -> list[Appointment]: ...


class Column(NamedTuple):
    header: str
    field: str
    width: int
    resizable: bool = False
    reorderable: bool = False


APPOINTMENT_COLUMNS: tuple[Column, ...] = (
    Column("ID", "appointment_id", 50),
    Column("Title", "title", 100),
    Column("Description", "description", 120),
    Column("Location", "location", 100),
    Column("Type", "type", 175),
    Column("Start Time", "start_display", 125),
    Column("End Time", "end_display", 125),
    Column("Customer", "customer_name", 140),
    Column("Customer ID", "customer_id", 75),
    Column("Contact", "contact_name", 130),
    Column("User ID", "user_id", 50),
)

_ZONED_FIELDS = frozenset({"start_display", "end_display"})
_LOOKUP_FIELDS = frozenset({"customer_name", "contact_name", "user_name"})


def parse_filter(value: AppointmentFilter | str) -> AppointmentFilter:
    if isinstance(value, AppointmentFilter):
        return value
    try:
        return AppointmentFilter(value)
    except ValueError:
        raise UnknownFilterError(f"Unknown appointment filter: {value!r}") from None


async def fetch_for_filter(source: AppointmentSource, selected: AppointmentFilter) -> list[Appointment]:
    if selected is AppointmentFilter.WEEK:
        return await source.get_appointments_for_current_week()
    if selected is AppointmentFilter.MONTH:
        return await source.get_appointments_for_current_month()
    return await source.get_all()


def constrained_widths(columns: tuple[Column, ...], total_width: int) -> list[int]:
    """Spread width beyond the columns' preferred total across them in proportion to their widths."""
    preferred = sum(c.width for c in columns)
    if total_width <= preferred or preferred == 0:
        return [c.width for c in columns]
    extra = total_width - preferred
    widths = [c.width + extra * c.width // preferred for c in columns]
    # integer division leaves a few pixels over; give them to the last column
    widths[-1] += total_width - sum(widths)
    return widths


def cell_value(
    appointment: Appointment, field: str, directory: AppointmentDirectory, zone: ZoneLike = TimeZone.LOCAL
) -> Any:
    if field in _ZONED_FIELDS:
        return getattr(appointment, field)(zone)
    if field in _LOOKUP_FIELDS:
        return getattr(appointment, field)(directory)
    return getattr(appointment, field)


class AppointmentView:
    def __init__(
        self,
        source: AppointmentSource,
        directory: AppointmentDirectory,
        zone: ZoneLike = TimeZone.LOCAL,
        columns: tuple[Column, ...] = APPOINTMENT_COLUMNS,
    ) -> None:
        self.source = source
        self.directory = directory
        self.zone = zone
        self.columns = columns
        self._filter = AppointmentFilter.ALL
        self._items: list[Appointment] = []
        self._selected: Appointment | None = None

    @classmethod
    async def open(
        cls,
        source: AppointmentSource,
        directory: AppointmentDirectory,
        zone: ZoneLike = TimeZone.LOCAL,
        columns: tuple[Column, ...] = APPOINTMENT_COLUMNS,
        initial: AppointmentFilter | str = AppointmentFilter.ALL,
    ) -> "AppointmentView":
        """Build a view already showing the ``initial`` filter's appointments."""
        view = cls(source, directory, zone, columns)
        await view.select_filter(initial)
        return view

    @property
    def filter(self) -> AppointmentFilter:
        return self._filter

    @property
    def items(self) -> list[Appointment]:
        return list(self._items)

    @property
    def selected(self) -> Appointment | None:
        return self._selected

    async def select_filter(self, value: AppointmentFilter | str) -> list[Appointment]:
        selected = parse_filter(value)
        items = await fetch_for_filter(self.source, selected)
        logger.debug("Appointment filter %s -> %s (%d rows)", self._filter.value, selected.value, len(items))
        self._filter = selected
        self._replace_items(items)
        return self.items

    async def refresh(self) -> list[Appointment]:
        return await self.select_filter(self._filter)

    def select_row(self, appointment_id: int | None) -> Appointment | None:
        self._selected = next((a for a in self._items if a.appointment_id == appointment_id), None)
        return self._selected

    def _replace_items(self, items: list[Appointment]) -> None:
        self._items = list(items)
        if self._selected is not None:
            self.select_row(self._selected.appointment_id)

    def rows(self) -> list[dict[str, Any]]:
        return [
            {c.field: cell_value(a, c.field, self.directory, self.zone) for c in self.columns}
            for a in self._items
        ]
