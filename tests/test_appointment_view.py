from datetime import datetime

import pytest

from app.models.contact import Contact
from app.services.lookup_service import ReferenceDirectory
from app.views.appointment_view import (
    APPOINTMENT_COLUMNS,
    AppointmentFilter,
    AppointmentView,
    UnknownFilterError,
    constrained_widths,
    fetch_for_filter,
    parse_filter,
)

NEW_YORK = "America/New_York"


class FakeSource:
    def __init__(self, week, month, everything):
        self.week = week
        self.month = month
        self.everything = everything
        self.calls = []

    async def get_appointments_for_current_week(self):
        self.calls.append("week")
        return list(self.week)

    async def get_appointments_for_current_month(self):
        self.calls.append("month")
        return list(self.month)

    async def get_all(self):
        self.calls.append("all")
        return list(self.everything)


@pytest.fixture
def appointments(make_appointment):
    return [
        make_appointment(appointment_id=1, start=datetime(2024, 3, 12, 15, 0), end=datetime(2024, 3, 12, 16, 0)),
        make_appointment(appointment_id=2, start=datetime(2024, 3, 25, 15, 0), end=datetime(2024, 3, 25, 16, 0)),
        make_appointment(appointment_id=3, start=datetime(2024, 4, 2, 15, 0), end=datetime(2024, 4, 2, 16, 0)),
    ]


@pytest.fixture
def source(appointments):
    return FakeSource(appointments[:1], appointments[:2], appointments)


@pytest.fixture
def directory():
    return ReferenceDirectory(
        customers={1: "Daddy Warbucks"},
        contacts={1: Contact(id=1, name="Anika Costa")},
        users={1: "test"},
    )


@pytest.fixture
async def view(source, directory):
    return await AppointmentView.open(source, directory, NEW_YORK)


class TestFilterState:
    async def test_defaults_to_all(self, view, source, appointments):
        assert view.filter is AppointmentFilter.ALL
        assert view.items == source.everything == appointments
        assert source.calls == ["all"]

    def test_plain_constructor_is_empty(self, source, directory):
        view = AppointmentView(source, directory, NEW_YORK)
        assert view.filter is AppointmentFilter.ALL
        assert view.items == []
        assert source.calls == []

    async def test_open_with_initial_filter(self, source, directory, appointments):
        view = await AppointmentView.open(source, directory, NEW_YORK, initial="Week")
        assert view.filter is AppointmentFilter.WEEK
        assert view.items == appointments[:1]
        assert source.calls == ["week"]

    async def test_refresh_uses_active_filter(self, view, source, appointments):
        assert await view.refresh() == appointments
        assert source.calls == ["all", "all"]

    async def test_week_then_month(self, view, source, appointments):
        assert await view.select_filter(AppointmentFilter.WEEK) == appointments[:1]
        assert view.filter is AppointmentFilter.WEEK
        assert await view.select_filter(AppointmentFilter.MONTH) == appointments[:2]
        assert source.calls == ["all", "week", "month"]

    @pytest.mark.parametrize("narrow", [AppointmentFilter.WEEK, AppointmentFilter.MONTH])
    async def test_all_after_narrow_filter_is_unfiltered(self, view, appointments, narrow):
        await view.select_filter(narrow)
        assert await view.select_filter(AppointmentFilter.ALL) == appointments
        assert view.filter is AppointmentFilter.ALL

    async def test_accepts_labels(self, view, source):
        await view.select_filter("Month")
        assert view.filter is AppointmentFilter.MONTH
        assert source.calls == ["all", "month"]

    async def test_unknown_label_raises_and_keeps_state(self, view, source, appointments):
        await view.select_filter("Week")

        with pytest.raises(UnknownFilterError):
            await view.select_filter("Year")

        assert view.filter is AppointmentFilter.WEEK
        assert view.items == appointments[:1]
        assert source.calls == ["all", "week"]

    async def test_refresh_refetches(self, view, source, appointments, make_appointment):
        await view.select_filter("Week")
        source.week = source.week + [make_appointment(appointment_id=9)]

        items = await view.refresh()

        assert [a.appointment_id for a in items] == [1, 9]
        assert source.calls == ["all", "week", "week"]

    async def test_items_is_a_copy(self, view):
        view.items.clear()
        assert len(view.items) == 3


class TestSelection:
    async def test_select_row(self, view):
        await view.refresh()
        assert view.select_row(2).appointment_id == 2
        assert view.selected.appointment_id == 2
        assert view.select_row(42) is None

    async def test_selection_survives_refresh_when_still_listed(self, view):
        await view.refresh()
        view.select_row(1)
        await view.select_filter("Week")
        assert view.selected.appointment_id == 1

    async def test_selection_cleared_when_filtered_out(self, view):
        await view.refresh()
        view.select_row(3)
        await view.select_filter("Month")
        assert view.selected is None


class TestRows:
    async def test_rows_follow_column_mapping(self, view):
        await view.select_filter("Week")

        (row,) = view.rows()

        assert list(row) == [c.field for c in APPOINTMENT_COLUMNS]
        assert row["appointment_id"] == 1
        assert row["start_display"] == "Mar 12, 2024 11:00 AM"
        assert row["end_display"] == "Mar 12, 2024 12:00 PM"
        assert row["customer_name"] == "Daddy Warbucks"
        assert row["contact_name"] == "Anika Costa"
        assert row["type"] == "Planning Session"


class TestColumns:
    def test_fixed_columns(self):
        assert [c.header for c in APPOINTMENT_COLUMNS] == [
            "ID",
            "Title",
            "Description",
            "Location",
            "Type",
            "Start Time",
            "End Time",
            "Customer",
            "Customer ID",
            "Contact",
            "User ID",
        ]
        assert [c.width for c in APPOINTMENT_COLUMNS] == [50, 100, 120, 100, 175, 125, 125, 140, 75, 130, 50]
        assert not any(c.resizable or c.reorderable for c in APPOINTMENT_COLUMNS)

    def test_constrained_widths_keep_preferred_when_no_room(self):
        preferred = [c.width for c in APPOINTMENT_COLUMNS]
        assert constrained_widths(APPOINTMENT_COLUMNS, 800) == preferred
        assert constrained_widths(APPOINTMENT_COLUMNS, sum(preferred)) == preferred

    def test_constrained_widths_spread_extra_space(self):
        widths = constrained_widths(APPOINTMENT_COLUMNS, 1400)

        assert sum(widths) == 1400
        assert all(w >= c.width for w, c in zip(widths, APPOINTMENT_COLUMNS))
        # wider columns get a larger share
        assert widths[4] - 175 > widths[0] - 50


class TestFetchForFilter:
    @pytest.mark.parametrize(
        "selected,call",
        [
            (AppointmentFilter.WEEK, "week"),
            (AppointmentFilter.MONTH, "month"),
            (AppointmentFilter.ALL, "all"),
        ],
    )
    async def test_maps_state_to_call(self, source, selected, call):
        await fetch_for_filter(source, selected)
        assert source.calls == [call]

    def test_parse_filter(self):
        assert parse_filter("All") is AppointmentFilter.ALL
        assert parse_filter(AppointmentFilter.WEEK) is AppointmentFilter.WEEK
        with pytest.raises(UnknownFilterError):
            parse_filter("week")
        with pytest.raises(ValueError):
            parse_filter("")
