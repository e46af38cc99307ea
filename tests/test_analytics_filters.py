"""Tests for analytics time-range and driver scoping."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from fleetmanager.analytics.filters import (
    TimeFilter,
    filter_by_driver,
    filter_by_time_range,
    filter_exclude_today,
    filter_shift_months,
)
from fleetmanager.domain import DailyEntry, Driver, Expense, ExpenseType

_TODAY = date(2026, 10, 18)


def _entry(entry_id: str, entry_date: date, driver_name: str = "Ali", driver_id: str = "") -> DailyEntry:
    """Build one entry with fixed income."""

    return DailyEntry(
        id=entry_id,
        entry_date=entry_date,
        driver_name=driver_name,
        vehicle="Camry",
        uber_earnings=Decimal("100"),
        driver_id=driver_id,
    )


def _expense(expense_id: str, expense_date: date, driver_name: str = "Ali", driver_id: str = "") -> Expense:
    """Build one fuel expense."""

    return Expense(
        id=expense_id,
        expense_type=ExpenseType.FUEL,
        amount=Decimal("20"),
        expense_date=expense_date,
        driver_name=driver_name,
        vehicle="Camry",
        driver_id=driver_id,
    )


def test_filter_exclude_today_drops_today_and_future_records() -> None:
    """Keep only records dated strictly before today.

    Returns:
        None: Assertions validate d-1 exclusion.

    Raises:
        AssertionError: Raised when today's records leak through.
    """

    entries, expenses = filter_exclude_today(
        entries=[_entry("e1", date(2026, 10, 17)), _entry("e2", _TODAY), _entry("e3", date(2026, 10, 19))],
        expenses=[_expense("x1", _TODAY), _expense("x2", date(2026, 10, 1))],
        today=_TODAY,
    )

    assert [entry.id for entry in entries] == ["e1"]
    assert [expense.id for expense in expenses] == ["x2"]


@pytest.mark.parametrize(
    ("time_filter", "expected_start"),
    [
        (TimeFilter.LAST_3_MONTHS, date(2026, 7, 17)),
        (TimeFilter.THIS_MONTH, date(2026, 10, 1)),
    ],
)
def test_filter_by_time_range_resolves_period_ending_yesterday(time_filter: TimeFilter, expected_start: date) -> None:
    """Resolve the period start per filter and always end yesterday.

    Returns:
        None: Assertions validate the resolved range.

    Raises:
        AssertionError: Raised when range bounds deviate.
    """

    filtered = filter_by_time_range([], [], time_filter, _TODAY)

    assert filtered.start_date == expected_start
    assert filtered.end_date == date(2026, 10, 17)


def test_filter_by_time_range_all_time_starts_at_earliest_entry() -> None:
    """Start ALL_TIME at the earliest entry date.

    Returns:
        None: Assertions validate the resolved range and scoped records.

    Raises:
        AssertionError: Raised when the range or scoping deviates.
    """

    filtered = filter_by_time_range(
        entries=[_entry("e1", date(2025, 2, 3)), _entry("e2", date(2026, 9, 1))],
        expenses=[_expense("x1", date(2025, 1, 1)), _expense("x2", date(2026, 9, 2))],
        time_filter=TimeFilter.ALL_TIME,
        today=_TODAY,
    )

    assert filtered.start_date == date(2025, 2, 3)
    assert [entry.id for entry in filtered.entries] == ["e1", "e2"]
    assert [expense.id for expense in filtered.expenses] == ["x2"]


def test_filter_by_time_range_all_time_without_entries_covers_one_year() -> None:
    """Fall back to one year before yesterday when there are no entries.

    Returns:
        None: Assertions validate the fallback range.

    Raises:
        AssertionError: Raised when the fallback start deviates.
    """

    filtered = filter_by_time_range([], [_expense("x1", date(2026, 1, 5))], TimeFilter.ALL_TIME, _TODAY)

    assert filtered.start_date == date(2025, 10, 17)
    assert len(filtered.expenses) == 1


def test_filter_by_driver_matches_ids_and_legacy_names() -> None:
    """Match records on driver id, falling back to normalized driver name.

    Returns:
        None: Assertions validate driver scoping.

    Raises:
        AssertionError: Raised when records are misattributed.
    """

    drivers = [Driver(id="d1", name="Ali"), Driver(id="d2", name="Omar")]
    entries = [
        _entry("e1", date(2026, 10, 1), driver_name="Ali Renamed", driver_id="d1"),
        _entry("e2", date(2026, 10, 2), driver_name=" ali "),
        _entry("e3", date(2026, 10, 3), driver_name="Omar", driver_id="d2"),
    ]
    expenses = [
        _expense("x1", date(2026, 10, 1), driver_id="d1"),
        _expense("x2", date(2026, 10, 2), driver_name="ALI"),
        _expense("x3", date(2026, 10, 3), driver_name="Omar"),
    ]

    scoped_entries, scoped_expenses, applied_driver_id = filter_by_driver(entries, expenses, drivers, "d1")

    assert [entry.id for entry in scoped_entries] == ["e1", "e2"]
    assert [expense.id for expense in scoped_expenses] == ["x1", "x2"]
    assert applied_driver_id == "d1"


def test_filter_by_driver_treats_unknown_id_as_all_drivers() -> None:
    """Return every record when the selected driver does not exist.

    Returns:
        None: Assertions validate the fallback.

    Raises:
        AssertionError: Raised when records are dropped.
    """

    entries = [_entry("e1", date(2026, 10, 1))]
    expenses = [_expense("x1", date(2026, 10, 1))]

    scoped_entries, scoped_expenses, applied_driver_id = filter_by_driver(
        entries,
        expenses,
        [Driver(id="d1", name="Ali")],
        "missing",
    )

    assert scoped_entries == entries
    assert scoped_expenses == expenses
    assert applied_driver_id is None


def test_filter_shift_months_clamps_day_and_crosses_years() -> None:
    """Shift by whole months, clamping to month end across year boundaries.

    Returns:
        None: Assertions validate shifted dates.

    Raises:
        AssertionError: Raised when shifting deviates.
    """

    assert filter_shift_months(date(2026, 5, 31), -3) == date(2026, 2, 28)
    assert filter_shift_months(date(2026, 1, 15), -1) == date(2025, 12, 15)
    assert filter_shift_months(date(2025, 11, 30), 3) == date(2026, 2, 28)
