"""Pure analytics aggregation over daily entries and expenses.

All functions are synchronous and side-effect free. Empty inputs yield empty
facets rather than errors, and every ratio is guarded against a zero
denominator.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, timedelta
from decimal import Decimal

from fleetmanager.domain import DailyEntry, Expense, ExpenseType

from .models import (
    AnomalyData,
    AnomalyType,
    DayOfWeekAnalysis,
    DriverPerformance,
    ExpenseBreakdown,
    IncomeLevel,
    MonthlyComparison,
    ProjectionData,
    TrendData,
    VehicleROI,
)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")

ANALYTICS_DEFAULT_ANOMALY_THRESHOLD_RATIO = Decimal("0.5")
ANALYTICS_DEFAULT_HIGH_INCOME_THRESHOLD = Decimal("250")
ANALYTICS_DEFAULT_MEDIUM_INCOME_THRESHOLD = Decimal("100")


def analytics_calculate_trend_data(
    entries: Iterable[DailyEntry],
    expenses: Iterable[Expense],
    start_date: date,
    end_date: date,
) -> list[TrendData]:
    """Build one trend point per calendar date in an inclusive range.

    Args:
        entries: Income entries.
        expenses: Expense records.
        start_date: First date of the range.
        end_date: Last date of the range.

    Returns:
        list[TrendData]: Ascending trend points; empty when start is after end.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    income_by_date = _analytics_sum_income_by_date(entries)
    expenses_by_date = _analytics_sum_expenses_by_date(expenses)

    trend_points: list[TrendData] = []
    current_date = start_date
    while current_date <= end_date:
        income = income_by_date.get(current_date, _ZERO)
        expense_total = expenses_by_date.get(current_date, _ZERO)
        trend_points.append(
            TrendData(
                date=current_date,
                income=income,
                expenses=expense_total,
                net_profit=income - expense_total,
            )
        )
        current_date += timedelta(days=1)
    return trend_points


def analytics_calculate_driver_performance(entries: Iterable[DailyEntry]) -> list[DriverPerformance]:
    """Aggregate revenue and active days per driver.

    Args:
        entries: Income entries.

    Returns:
        list[DriverPerformance]: Drivers ordered by total revenue, highest first.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    revenue_by_driver: dict[str, Decimal] = {}
    dates_by_driver: dict[str, set[date]] = {}
    for entry in entries:
        revenue_by_driver[entry.driver_name] = revenue_by_driver.get(entry.driver_name, _ZERO) + entry.total_earnings
        dates_by_driver.setdefault(entry.driver_name, set()).add(entry.entry_date)

    performances = []
    for driver_name, total_revenue in revenue_by_driver.items():
        active_days = len(dates_by_driver[driver_name])
        performances.append(
            DriverPerformance(
                driver_name=driver_name,
                total_revenue=total_revenue,
                average_revenue_per_day=_analytics_safe_divide(total_revenue, Decimal(active_days)),
                active_days=active_days,
            )
        )
    return sorted(performances, key=lambda performance: performance.total_revenue, reverse=True)


def analytics_calculate_vehicle_roi(entries: Iterable[DailyEntry], expenses: Iterable[Expense]) -> list[VehicleROI]:
    """Compute income, expenses and ROI per vehicle.

    Args:
        entries: Income entries.
        expenses: Expense records.

    Returns:
        list[VehicleROI]: Vehicles ordered by ROI, highest first.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    income_by_vehicle: dict[str, Decimal] = {}
    for entry in entries:
        income_by_vehicle[entry.vehicle] = income_by_vehicle.get(entry.vehicle, _ZERO) + entry.total_earnings

    expenses_by_vehicle: dict[str, Decimal] = {}
    for expense in expenses:
        expenses_by_vehicle[expense.vehicle] = expenses_by_vehicle.get(expense.vehicle, _ZERO) + expense.amount

    vehicle_names = list(dict.fromkeys([*income_by_vehicle, *expenses_by_vehicle]))
    roi_rows = []
    for vehicle_name in vehicle_names:
        total_income = income_by_vehicle.get(vehicle_name, _ZERO)
        total_expenses = expenses_by_vehicle.get(vehicle_name, _ZERO)
        net_profit = total_income - total_expenses
        roi_rows.append(
            VehicleROI(
                vehicle_name=vehicle_name,
                total_income=total_income,
                total_expenses=total_expenses,
                net_profit=net_profit,
                roi=_analytics_safe_divide(net_profit, total_expenses) * _HUNDRED,
            )
        )
    return sorted(roi_rows, key=lambda roi_row: roi_row.roi, reverse=True)


def analytics_calculate_day_of_week_analysis(entries: Iterable[DailyEntry]) -> list[DayOfWeekAnalysis]:
    """Aggregate income per weekday regardless of calendar date.

    Args:
        entries: Income entries.

    Returns:
        list[DayOfWeekAnalysis]: Seven rows, Monday through Sunday.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    income_by_weekday: dict[int, Decimal] = {}
    dates_by_weekday: dict[int, set[date]] = {}
    for entry in entries:
        weekday = entry.entry_date.isoweekday()
        income_by_weekday[weekday] = income_by_weekday.get(weekday, _ZERO) + entry.total_earnings
        dates_by_weekday.setdefault(weekday, set()).add(entry.entry_date)

    analysis_rows = []
    for weekday in range(1, 8):
        total_income = income_by_weekday.get(weekday, _ZERO)
        total_days = len(dates_by_weekday.get(weekday, ()))
        analysis_rows.append(
            DayOfWeekAnalysis(
                day_of_week=weekday,
                average_income=_analytics_safe_divide(total_income, Decimal(total_days)),
                total_days=total_days,
                total_income=total_income,
            )
        )
    return analysis_rows


def analytics_calculate_expense_breakdown(expenses: Iterable[Expense]) -> list[ExpenseBreakdown]:
    """Aggregate expenses per category with share of the grand total.

    Args:
        expenses: Expense records.

    Returns:
        list[ExpenseBreakdown]: Categories ordered by total amount, highest first.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    totals_by_type: dict[ExpenseType, Decimal] = {}
    counts_by_type: dict[ExpenseType, int] = {}
    for expense in expenses:
        totals_by_type[expense.expense_type] = totals_by_type.get(expense.expense_type, _ZERO) + expense.amount
        counts_by_type[expense.expense_type] = counts_by_type.get(expense.expense_type, 0) + 1

    grand_total = sum(totals_by_type.values(), _ZERO)
    breakdown_rows = [
        ExpenseBreakdown(
            expense_type=expense_type,
            total_amount=type_total,
            percentage=_analytics_safe_divide(type_total, grand_total) * _HUNDRED,
            count=counts_by_type[expense_type],
        )
        for expense_type, type_total in totals_by_type.items()
    ]
    return sorted(breakdown_rows, key=lambda breakdown_row: breakdown_row.total_amount, reverse=True)


def analytics_detect_anomalies(
    entries: Iterable[DailyEntry],
    expenses: Iterable[Expense],
    threshold_ratio: Decimal = ANALYTICS_DEFAULT_ANOMALY_THRESHOLD_RATIO,
) -> list[AnomalyData]:
    """Flag dates whose income or expenses deviate from the period average.

    The baseline is the mean of per-date totals across the input. Income days
    are flagged ZERO_INCOME or LOW_INCOME, expense days HIGH_EXPENSES.

    Args:
        entries: Income entries.
        expenses: Expense records.
        threshold_ratio: Relative deviation that triggers a flag.

    Returns:
        list[AnomalyData]: Anomalies ordered by date, most recent first.

    Raises:
        ValueError: Raised when threshold_ratio is outside (0, 1).
    """

    if threshold_ratio <= 0 or threshold_ratio >= 1:
        raise ValueError("threshold_ratio must be between 0 and 1")

    anomalies: list[AnomalyData] = []

    income_by_date = _analytics_sum_income_by_date(entries)
    average_income = _analytics_mean(income_by_date.values())
    for entry_date, income in income_by_date.items():
        deviation = _analytics_safe_divide(abs(income - average_income), average_income)
        if income == _ZERO and average_income > _ZERO:
            anomalies.append(
                AnomalyData(
                    date=entry_date,
                    anomaly_type=AnomalyType.ZERO_INCOME,
                    actual_value=income,
                    expected_value=average_income,
                    deviation=deviation,
                    reason="No income recorded",
                )
            )
        elif income < average_income * (1 - threshold_ratio):
            anomalies.append(
                AnomalyData(
                    date=entry_date,
                    anomaly_type=AnomalyType.LOW_INCOME,
                    actual_value=income,
                    expected_value=average_income,
                    deviation=deviation,
                    reason=f"Income {deviation * _HUNDRED:.0f}% below average",
                )
            )

    expenses_by_date = _analytics_sum_expenses_by_date(expenses)
    average_expenses = _analytics_mean(expenses_by_date.values())
    for expense_date, expense_total in expenses_by_date.items():
        if expense_total > average_expenses * (1 + threshold_ratio):
            deviation = _analytics_safe_divide(abs(expense_total - average_expenses), average_expenses)
            anomalies.append(
                AnomalyData(
                    date=expense_date,
                    anomaly_type=AnomalyType.HIGH_EXPENSES,
                    actual_value=expense_total,
                    expected_value=average_expenses,
                    deviation=deviation,
                    reason=f"Expenses {deviation * _HUNDRED:.0f}% above average",
                )
            )

    return sorted(anomalies, key=lambda anomaly: anomaly.date, reverse=True)


def analytics_calculate_monthly_comparison(
    current_month_entries: Iterable[DailyEntry],
    previous_month_entries: Iterable[DailyEntry],
    current_month_name: str,
    previous_month_name: str,
) -> MonthlyComparison:
    """Compare income between two months.

    Args:
        current_month_entries: Entries of the current month.
        previous_month_entries: Entries of the previous month.
        current_month_name: Current month label.
        previous_month_name: Previous month label.

    Returns:
        MonthlyComparison: Totals with absolute and relative growth.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    current_total = analytics_sum_income(current_month_entries)
    previous_total = analytics_sum_income(previous_month_entries)
    growth_amount = current_total - previous_total
    growth_percentage = _analytics_safe_divide(growth_amount, previous_total) * _HUNDRED if previous_total > 0 else _ZERO

    return MonthlyComparison(
        current_month=current_month_name,
        current_total=current_total,
        previous_month=previous_month_name,
        previous_total=previous_total,
        growth_percentage=growth_percentage,
        growth_amount=growth_amount,
    )


def analytics_calculate_projection(
    current_month_entries: Iterable[DailyEntry],
    as_of_date: date,
    previous_month_total: Decimal | None = None,
) -> ProjectionData:
    """Project end-of-month income from partial-month entries.

    Args:
        current_month_entries: Entries of the month containing `as_of_date`.
        as_of_date: Last date covered by the entries.
        previous_month_total: Optional full previous-month income for comparison.

    Returns:
        ProjectionData: Projection with daily and active-day averages.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    month_entries = list(current_month_entries)
    current_total = analytics_sum_income(month_entries)
    days_elapsed = as_of_date.day
    total_days_in_month = calendar.monthrange(as_of_date.year, as_of_date.month)[1]

    daily_average = _analytics_safe_divide(current_total, Decimal(days_elapsed))
    projected_total = daily_average * total_days_in_month

    income_by_date = _analytics_sum_income_by_date(month_entries)
    active_revenue_days = sum(1 for income in income_by_date.values() if income != _ZERO)
    active_day_average = _analytics_safe_divide(current_total, Decimal(active_revenue_days))

    comparison_to_previous = _ZERO
    if previous_month_total is not None and previous_month_total > 0:
        comparison_to_previous = (projected_total - previous_month_total) / previous_month_total * _HUNDRED

    return ProjectionData(
        current_month_total=current_total,
        projected_month_total=projected_total,
        days_elapsed=days_elapsed,
        total_days_in_month=total_days_in_month,
        daily_average=daily_average,
        comparison_to_previous=comparison_to_previous,
        active_revenue_days=active_revenue_days,
        active_day_average=active_day_average,
    )


def analytics_income_level(
    total_income: Decimal,
    high_threshold: Decimal = ANALYTICS_DEFAULT_HIGH_INCOME_THRESHOLD,
    medium_threshold: Decimal = ANALYTICS_DEFAULT_MEDIUM_INCOME_THRESHOLD,
) -> IncomeLevel:
    """Classify one day's income into a colour-coding band.

    Args:
        total_income: Income for the day.
        high_threshold: Lower bound of the HIGH band.
        medium_threshold: Lower bound of the MEDIUM band.

    Returns:
        IncomeLevel: Income band.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if total_income >= high_threshold:
        return IncomeLevel.HIGH
    if total_income >= medium_threshold:
        return IncomeLevel.MEDIUM
    if total_income > 0:
        return IncomeLevel.LOW
    return IncomeLevel.NONE


def analytics_resolve_comparison_date(current_date: date, year: int, month: int) -> date:
    """Map a date onto the same day of another month, clamped to month end.

    For example 31 March compared against February resolves to 28 or 29
    February.

    Args:
        current_date: Reference date.
        year: Target year.
        month: Target month.

    Returns:
        date: Comparable date inside the target month.

    Raises:
        ValueError: Raised when month is outside 1..12.
    """

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(current_date.day, last_day))


def analytics_sum_income(entries: Iterable[DailyEntry]) -> Decimal:
    """Return total earnings across entries."""
    return sum((entry.total_earnings for entry in entries), _ZERO)


def _analytics_sum_income_by_date(entries: Iterable[DailyEntry]) -> dict[date, Decimal]:
    income_by_date: dict[date, Decimal] = {}
    for entry in entries:
        income_by_date[entry.entry_date] = income_by_date.get(entry.entry_date, _ZERO) + entry.total_earnings
    return income_by_date


def _analytics_sum_expenses_by_date(expenses: Iterable[Expense]) -> dict[date, Decimal]:
    expenses_by_date: dict[date, Decimal] = {}
    for expense in expenses:
        expenses_by_date[expense.expense_date] = expenses_by_date.get(expense.expense_date, _ZERO) + expense.amount
    return expenses_by_date


def _analytics_mean(values: Iterable[Decimal]) -> Decimal:
    materialized_values = list(values)
    if not materialized_values:
        return _ZERO
    return sum(materialized_values, _ZERO) / Decimal(len(materialized_values))


def _analytics_safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    if denominator == _ZERO:
        return _ZERO
    return numerator / denominator


__all__ = [
    "ANALYTICS_DEFAULT_ANOMALY_THRESHOLD_RATIO",
    "ANALYTICS_DEFAULT_HIGH_INCOME_THRESHOLD",
    "ANALYTICS_DEFAULT_MEDIUM_INCOME_THRESHOLD",
    "analytics_calculate_day_of_week_analysis",
    "analytics_calculate_driver_performance",
    "analytics_calculate_expense_breakdown",
    "analytics_calculate_monthly_comparison",
    "analytics_calculate_projection",
    "analytics_calculate_trend_data",
    "analytics_calculate_vehicle_roi",
    "analytics_detect_anomalies",
    "analytics_income_level",
    "analytics_resolve_comparison_date",
    "analytics_sum_income",
]
