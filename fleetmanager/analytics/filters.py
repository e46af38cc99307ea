"""Time-range and driver scoping for analytics inputs.

Analytics never include the current day: a record dated today or later is
dropped before any facet is computed.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from fleetmanager.domain import DailyEntry, Driver, Expense


class TimeFilter(Enum):
    """Selectable analytics periods."""

    ALL_TIME = "ALL_TIME"
    LAST_3_MONTHS = "LAST_3_MONTHS"
    THIS_MONTH = "THIS_MONTH"


@dataclass(frozen=True)
class FilteredData:
    """Entries and expenses scoped to one resolved date range.

    Attributes:
        entries: Entries inside the range.
        expenses: Expenses inside the range.
        start_date: Inclusive range start.
        end_date: Inclusive range end.
    """

    entries: tuple[DailyEntry, ...]
    expenses: tuple[Expense, ...]
    start_date: date
    end_date: date


def filter_exclude_today(
    entries: list[DailyEntry],
    expenses: list[Expense],
    today: date,
) -> tuple[list[DailyEntry], list[Expense]]:
    """Drop records dated today or later.

    Args:
        entries: Candidate entries.
        expenses: Candidate expenses.
        today: Local current date.

    Returns:
        tuple[list[DailyEntry], list[Expense]]: Records strictly before today.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return (
        [entry for entry in entries if entry.entry_date < today],
        [expense for expense in expenses if expense.expense_date < today],
    )


def filter_by_time_range(
    entries: list[DailyEntry],
    expenses: list[Expense],
    time_filter: TimeFilter,
    today: date,
) -> FilteredData:
    """Resolve the period for a time filter and keep records inside it.

    The range always ends yesterday. ALL_TIME starts at the earliest entry,
    or one year before yesterday when there are no entries.

    Args:
        entries: Candidate entries.
        expenses: Candidate expenses.
        time_filter: Selected period.
        today: Local current date.

    Returns:
        FilteredData: Scoped records with the resolved range.

    Raises:
        ValueError: Raised when time_filter is unsupported.
    """

    yesterday = today - timedelta(days=1)
    if time_filter is TimeFilter.ALL_TIME:
        if entries:
            start_date = min(entry.entry_date for entry in entries)
        else:
            start_date = filter_shift_months(yesterday, -12)
    elif time_filter is TimeFilter.LAST_3_MONTHS:
        start_date = filter_shift_months(yesterday, -3)
    elif time_filter is TimeFilter.THIS_MONTH:
        start_date = today.replace(day=1)
    else:
        raise ValueError(f"unsupported time_filter={time_filter}")

    return FilteredData(
        entries=tuple(entry for entry in entries if start_date <= entry.entry_date <= yesterday),
        expenses=tuple(expense for expense in expenses if start_date <= expense.expense_date <= yesterday),
        start_date=start_date,
        end_date=yesterday,
    )


def filter_by_driver(
    entries: list[DailyEntry],
    expenses: list[Expense],
    drivers: list[Driver],
    driver_id: str | None,
) -> tuple[list[DailyEntry], list[Expense], str | None]:
    """Keep only records belonging to one driver.

    Records carrying an explicit driver id match on it; legacy records without
    one match on the normalized driver name. An unknown driver id selects all
    drivers.

    Args:
        entries: Candidate entries.
        expenses: Candidate expenses.
        drivers: Known drivers.
        driver_id: Selected driver identifier, or None for all drivers.

    Returns:
        tuple[list[DailyEntry], list[Expense], str | None]: Scoped records and
        the driver id actually applied.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    driver_names_by_id = {driver.id: driver.name for driver in drivers}
    if driver_id is None or driver_id not in driver_names_by_id:
        return entries, expenses, None

    driver_ids_by_name = {filter_normalize_name(driver.name): driver.id for driver in drivers}
    selected_name = filter_normalize_name(driver_names_by_id[driver_id])

    scoped_entries = [
        entry for entry in entries if filter_resolve_entry_driver_id(entry, driver_ids_by_name) == driver_id
    ]
    scoped_expenses = []
    for expense in expenses:
        if expense.driver_id.strip():
            if expense.driver_id == driver_id:
                scoped_expenses.append(expense)
        elif filter_normalize_name(expense.driver_name) == selected_name:
            scoped_expenses.append(expense)
    return scoped_entries, scoped_expenses, driver_id


def filter_resolve_entry_driver_id(entry: DailyEntry, driver_ids_by_name: dict[str, str]) -> str | None:
    """Resolve the driver id of an entry, falling back to its driver name."""

    if entry.driver_id.strip():
        return entry.driver_id
    if not entry.driver_name.strip():
        return None
    return driver_ids_by_name.get(filter_normalize_name(entry.driver_name))


def filter_normalize_name(raw_name: str) -> str:
    """Normalize a display name for case-insensitive matching."""
    return raw_name.strip().lower()


def filter_shift_months(value: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month end.

    Args:
        value: Source date.
        months: Month offset, negative to go back.

    Returns:
        date: Shifted date.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    month_index = value.year * 12 + (value.month - 1) + months
    target_year, target_month_zero_based = divmod(month_index, 12)
    target_month = target_month_zero_based + 1
    last_day = calendar.monthrange(target_year, target_month)[1]
    return date(target_year, target_month, min(value.day, last_day))


__all__ = [
    "FilteredData",
    "TimeFilter",
    "filter_by_driver",
    "filter_by_time_range",
    "filter_exclude_today",
    "filter_normalize_name",
    "filter_resolve_entry_driver_id",
    "filter_shift_months",
]
