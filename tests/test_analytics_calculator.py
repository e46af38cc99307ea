"""Regression tests for pure analytics aggregation over entries and expenses."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from fleetmanager.analytics.calculator import (
    analytics_calculate_day_of_week_analysis,
    analytics_calculate_driver_performance,
    analytics_calculate_expense_breakdown,
    analytics_calculate_monthly_comparison,
    analytics_calculate_projection,
    analytics_calculate_trend_data,
    analytics_calculate_vehicle_roi,
    analytics_detect_anomalies,
    analytics_income_level,
    analytics_resolve_comparison_date,
)
from fleetmanager.analytics.models import AnomalyType, IncomeLevel, TrendData
from fleetmanager.domain import DailyEntry, Expense, ExpenseType


def _entry(
    entry_id: str,
    entry_date: date,
    income: str,
    driver_name: str = "Ali",
    vehicle: str = "Camry",
) -> DailyEntry:
    """Build one entry with all income booked on the Uber channel."""

    return DailyEntry(
        id=entry_id,
        entry_date=entry_date,
        driver_name=driver_name,
        vehicle=vehicle,
        uber_earnings=Decimal(income),
    )


def _expense(
    expense_id: str,
    expense_date: date,
    amount: str,
    expense_type: ExpenseType = ExpenseType.FUEL,
    vehicle: str = "Camry",
) -> Expense:
    """Build one expense for the default driver."""

    return Expense(
        id=expense_id,
        expense_type=expense_type,
        amount=Decimal(amount),
        expense_date=expense_date,
        driver_name="Ali",
        vehicle=vehicle,
    )


def test_analytics_trend_data_fills_every_day_with_exact_net_profit() -> None:
    """Build one point per date with net profit equal to income minus expenses.

    Returns:
        None: Assertions validate trend points.

    Raises:
        AssertionError: Raised when trend values deviate.
    """

    day_1 = date(2026, 10, 1)
    day_2 = date(2026, 10, 2)

    trend = analytics_calculate_trend_data(
        entries=[_entry("e1", day_1, "100"), _entry("e2", day_2, "200")],
        expenses=[_expense("x1", day_1, "50")],
        start_date=day_1,
        end_date=day_2,
    )

    assert trend == [
        TrendData(date=day_1, income=Decimal("100"), expenses=Decimal("50"), net_profit=Decimal("50")),
        TrendData(date=day_2, income=Decimal("200"), expenses=Decimal("0"), net_profit=Decimal("200")),
    ]


def test_analytics_trend_data_includes_days_without_records() -> None:
    """Emit zero-valued points for dates with no records.

    Returns:
        None: Assertions validate gap filling.

    Raises:
        AssertionError: Raised when gap dates are missing.
    """

    trend = analytics_calculate_trend_data(
        entries=[_entry("e1", date(2026, 10, 1), "80")],
        expenses=[],
        start_date=date(2026, 10, 1),
        end_date=date(2026, 10, 3),
    )

    assert [point.date.day for point in trend] == [1, 2, 3]
    assert trend[2].income == Decimal("0")
    assert trend[2].net_profit == Decimal("0")


def test_analytics_trend_data_is_empty_when_range_is_reversed() -> None:
    """Return no points when the start date is after the end date.

    Returns:
        None: Assertions validate empty output.

    Raises:
        AssertionError: Raised when points are produced.
    """

    assert analytics_calculate_trend_data([], [], date(2026, 10, 5), date(2026, 10, 4)) == []


def test_analytics_driver_performance_averages_over_active_days() -> None:
    """Average revenue over distinct active days and rank drivers by revenue.

    Returns:
        None: Assertions validate driver rows.

    Raises:
        AssertionError: Raised when averages or order deviate.
    """

    entries = [
        _entry("e1", date(2026, 10, 1), "100", driver_name="A"),
        _entry("e2", date(2026, 10, 3), "200", driver_name="A"),
        _entry("e3", date(2026, 10, 2), "150", driver_name="B"),
        _entry("e4", date(2026, 10, 4), "150", driver_name="B"),
        _entry("e5", date(2026, 10, 5), "50", driver_name="B"),
    ]

    performance = analytics_calculate_driver_performance(entries)

    assert [row.driver_name for row in performance] == ["B", "A"]
    driver_a = performance[1]
    assert driver_a.total_revenue == Decimal("300")
    assert driver_a.average_revenue_per_day == Decimal("150")
    assert driver_a.active_days == 2
    assert driver_a.total_trips == 0


def test_analytics_driver_performance_counts_same_day_entries_once() -> None:
    """Count a date once even when a driver has several entries on it.

    Returns:
        None: Assertions validate active-day counting.

    Raises:
        AssertionError: Raised when duplicate dates inflate active days.
    """

    entries = [
        _entry("e1", date(2026, 10, 1), "60", driver_name="A"),
        _entry("e2", date(2026, 10, 1), "40", driver_name="A"),
    ]

    performance = analytics_calculate_driver_performance(entries)

    assert performance[0].active_days == 1
    assert performance[0].average_revenue_per_day == Decimal("100")


def test_analytics_vehicle_roi_is_zero_guarded_and_sorted() -> None:
    """Compute ROI per vehicle with zero ROI when a vehicle has no expenses.

    Returns:
        None: Assertions validate ROI values and order.

    Raises:
        AssertionError: Raised when ROI deviates.
    """

    entries = [
        _entry("e1", date(2026, 10, 1), "300", vehicle="Camry"),
        _entry("e2", date(2026, 10, 1), "100", vehicle="Corolla"),
    ]
    expenses = [
        _expense("x1", date(2026, 10, 1), "100", vehicle="Camry"),
        _expense("x2", date(2026, 10, 2), "50", vehicle="Prius"),
    ]

    roi_rows = analytics_calculate_vehicle_roi(entries, expenses)

    assert [row.vehicle_name for row in roi_rows] == ["Camry", "Corolla", "Prius"]
    assert roi_rows[0].net_profit == Decimal("200")
    assert roi_rows[0].roi == Decimal("200")
    assert roi_rows[1].total_expenses == Decimal("0")
    assert roi_rows[1].roi == Decimal("0")
    assert roi_rows[2].total_income == Decimal("0")
    assert roi_rows[2].roi == Decimal("-100")


def test_analytics_day_of_week_analysis_returns_seven_rows() -> None:
    """Group income by ISO weekday and keep empty weekdays as zero rows.

    Returns:
        None: Assertions validate weekday rows.

    Raises:
        AssertionError: Raised when weekday aggregation deviates.
    """

    entries = [
        _entry("e1", date(2026, 10, 5), "100"),
        _entry("e2", date(2026, 10, 12), "300"),
        _entry("e3", date(2026, 10, 18), "70"),
    ]

    analysis = analytics_calculate_day_of_week_analysis(entries)

    assert [row.day_of_week for row in analysis] == [1, 2, 3, 4, 5, 6, 7]
    monday = analysis[0]
    assert monday.total_days == 2
    assert monday.total_income == Decimal("400")
    assert monday.average_income == Decimal("200")
    assert analysis[1].total_days == 0
    assert analysis[1].average_income == Decimal("0")
    assert analysis[6].total_income == Decimal("70")


def test_analytics_expense_breakdown_percentages_sum_to_one_hundred() -> None:
    """Share each category of the grand total so percentages sum to about 100.

    Returns:
        None: Assertions validate breakdown rows.

    Raises:
        AssertionError: Raised when shares deviate.
    """

    expenses = [
        _expense("x1", date(2026, 10, 1), "10", ExpenseType.FUEL),
        _expense("x2", date(2026, 10, 2), "10", ExpenseType.CAR_WASH),
        _expense("x3", date(2026, 10, 3), "5", ExpenseType.FINE),
        _expense("x4", date(2026, 10, 4), "5", ExpenseType.FINE),
    ]

    breakdown = analytics_calculate_expense_breakdown(expenses)

    assert {row.expense_type for row in breakdown} == {ExpenseType.FUEL, ExpenseType.CAR_WASH, ExpenseType.FINE}
    assert abs(sum(row.percentage for row in breakdown) - Decimal("100")) < Decimal("0.0001")
    fine_row = next(row for row in breakdown if row.expense_type is ExpenseType.FINE)
    assert fine_row.count == 2
    assert fine_row.total_amount == Decimal("10")


def test_analytics_expense_breakdown_is_empty_without_expenses() -> None:
    """Return no rows for empty input.

    Returns:
        None: Assertions validate empty output.

    Raises:
        AssertionError: Raised when rows are produced.
    """

    assert analytics_calculate_expense_breakdown([]) == []


def test_analytics_detect_anomalies_flags_low_income_against_mean() -> None:
    """Flag a day earning less than half of the per-date mean.

    Returns:
        None: Assertions validate anomaly rows.

    Raises:
        AssertionError: Raised when anomalies deviate.
    """

    entries = [
        _entry("e1", date(2026, 10, 1), "100"),
        _entry("e2", date(2026, 10, 2), "100"),
        _entry("e3", date(2026, 10, 3), "100"),
        _entry("e4", date(2026, 10, 4), "20"),
    ]

    anomalies = analytics_detect_anomalies(entries, [])

    assert len(anomalies) == 1
    anomaly = anomalies[0]
    assert anomaly.date == date(2026, 10, 4)
    assert anomaly.anomaly_type is AnomalyType.LOW_INCOME
    assert anomaly.expected_value == Decimal("80")
    assert anomaly.deviation == Decimal("0.75")
    assert anomaly.reason == "Income 75% below average"


def test_analytics_detect_anomalies_flags_zero_income_and_high_expenses() -> None:
    """Flag zero-income days and expense spikes, most recent first.

    Returns:
        None: Assertions validate anomaly kinds and order.

    Raises:
        AssertionError: Raised when anomalies deviate.
    """

    entries = [
        _entry("e1", date(2026, 10, 1), "200"),
        _entry("e2", date(2026, 10, 2), "0"),
        _entry("e3", date(2026, 10, 3), "100"),
    ]
    expenses = [
        _expense("x1", date(2026, 10, 1), "50"),
        _expense("x2", date(2026, 10, 2), "50"),
        _expense("x3", date(2026, 10, 5), "200"),
    ]

    anomalies = analytics_detect_anomalies(entries, expenses)

    assert [(anomaly.date.day, anomaly.anomaly_type) for anomaly in anomalies] == [
        (5, AnomalyType.HIGH_EXPENSES),
        (2, AnomalyType.ZERO_INCOME),
    ]
    assert anomalies[0].reason == "Expenses 100% above average"
    assert anomalies[1].reason == "No income recorded"


def test_analytics_detect_anomalies_rejects_out_of_range_threshold() -> None:
    """Reject threshold ratios outside the open unit interval.

    Returns:
        None: Assertions validate argument checking.

    Raises:
        AssertionError: Raised when invalid ratios are accepted.
    """

    with pytest.raises(ValueError):
        analytics_detect_anomalies([], [], threshold_ratio=Decimal("1"))
    with pytest.raises(ValueError):
        analytics_detect_anomalies([], [], threshold_ratio=Decimal("0"))


def test_analytics_monthly_comparison_zero_guards_growth_percentage() -> None:
    """Report zero growth percentage when the previous month earned nothing.

    Returns:
        None: Assertions validate comparison values.

    Raises:
        AssertionError: Raised when growth is not guarded.
    """

    comparison = analytics_calculate_monthly_comparison(
        current_month_entries=[_entry("e1", date(2026, 10, 3), "500")],
        previous_month_entries=[],
        current_month_name="OCTOBER",
        previous_month_name="SEPTEMBER",
    )

    assert comparison.previous_total == Decimal("0")
    assert comparison.growth_amount == Decimal("500")
    assert comparison.growth_percentage == Decimal("0")


def test_analytics_monthly_comparison_reports_relative_growth() -> None:
    """Compute growth relative to the previous month.

    Returns:
        None: Assertions validate growth values.

    Raises:
        AssertionError: Raised when growth deviates.
    """

    comparison = analytics_calculate_monthly_comparison(
        current_month_entries=[_entry("e1", date(2026, 10, 3), "600")],
        previous_month_entries=[_entry("e2", date(2026, 9, 3), "400")],
        current_month_name="OCTOBER",
        previous_month_name="SEPTEMBER",
    )

    assert comparison.growth_amount == Decimal("200")
    assert comparison.growth_percentage == Decimal("50")


def test_analytics_projection_extrapolates_daily_average() -> None:
    """Project the month from the calendar-day average and compare to last month.

    Returns:
        None: Assertions validate projection values.

    Raises:
        AssertionError: Raised when projection deviates.
    """

    entries = [_entry(f"e{day}", date(2026, 3, day), "200") for day in (1, 3, 5, 7, 9)]

    projection = analytics_calculate_projection(entries, date(2026, 3, 10), previous_month_total=Decimal("2000"))

    assert projection.current_month_total == Decimal("1000")
    assert projection.days_elapsed == 10
    assert projection.total_days_in_month == 31
    assert projection.daily_average == Decimal("100")
    assert projection.projected_month_total == Decimal("3100")
    assert projection.active_revenue_days == 5
    assert projection.active_day_average == Decimal("200")
    assert projection.comparison_to_previous == Decimal("55")


def test_analytics_resolve_comparison_date_clamps_to_month_end() -> None:
    """Clamp the comparison day to the target month's last day.

    Returns:
        None: Assertions validate clamping.

    Raises:
        AssertionError: Raised when clamping deviates.
    """

    assert analytics_resolve_comparison_date(date(2026, 3, 31), 2026, 2) == date(2026, 2, 28)
    assert analytics_resolve_comparison_date(date(2024, 3, 31), 2024, 2) == date(2024, 2, 29)
    assert analytics_resolve_comparison_date(date(2026, 3, 15), 2026, 2) == date(2026, 2, 15)


def test_analytics_income_level_uses_inclusive_lower_bounds() -> None:
    """Classify daily income into bands with inclusive thresholds.

    Returns:
        None: Assertions validate income bands.

    Raises:
        AssertionError: Raised when bands deviate.
    """

    assert analytics_income_level(Decimal("250")) is IncomeLevel.HIGH
    assert analytics_income_level(Decimal("100")) is IncomeLevel.MEDIUM
    assert analytics_income_level(Decimal("99.99")) is IncomeLevel.LOW
    assert analytics_income_level(Decimal("0")) is IncomeLevel.NONE
