"""Derived analytics value types.

Every value here is recomputed from source records on demand and discarded
after rendering; nothing in this module is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from fleetmanager.domain import ExpenseType


@dataclass(frozen=True)
class TrendData:
    """Income, expenses and net profit for one calendar date.

    Attributes:
        date: Calendar date.
        income: Income recorded on the date.
        expenses: Expenses recorded on the date.
        net_profit: Income minus expenses.
    """

    date: date
    income: Decimal
    expenses: Decimal
    net_profit: Decimal


@dataclass(frozen=True)
class DriverPerformance:
    """Revenue aggregate for one driver.

    Attributes:
        driver_name: Driver display name.
        total_revenue: Income across all entries.
        average_revenue_per_day: Revenue per active day.
        active_days: Distinct dates with at least one entry.
        total_trips: Trip count when trip data is available.
    """

    driver_name: str
    total_revenue: Decimal
    average_revenue_per_day: Decimal
    active_days: int
    total_trips: int = 0


@dataclass(frozen=True)
class VehicleROI:
    """Return on investment for one vehicle.

    Attributes:
        vehicle_name: Vehicle display name.
        total_income: Income attributed to the vehicle.
        total_expenses: Expenses attributed to the vehicle.
        net_profit: Income minus expenses.
        roi: Net profit over expenses as a percentage, 0 without expenses.
    """

    vehicle_name: str
    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    roi: Decimal


@dataclass(frozen=True)
class DayOfWeekAnalysis:
    """Income aggregate for one weekday.

    Attributes:
        day_of_week: ISO weekday number, 1 (Monday) to 7 (Sunday).
        average_income: Income per distinct date on this weekday.
        total_days: Distinct dates on this weekday with entries.
        total_income: Income across those dates.
    """

    day_of_week: int
    average_income: Decimal
    total_days: int
    total_income: Decimal


@dataclass(frozen=True)
class ExpenseBreakdown:
    """Expense aggregate for one category.

    Attributes:
        expense_type: Expense category.
        total_amount: Sum of amounts in the category.
        percentage: Share of the grand total across all categories.
        count: Number of expenses in the category.
    """

    expense_type: ExpenseType
    total_amount: Decimal
    percentage: Decimal
    count: int


class AnomalyType(Enum):
    """Anomaly classifications."""

    LOW_INCOME = "LOW_INCOME"
    HIGH_EXPENSES = "HIGH_EXPENSES"
    ZERO_INCOME = "ZERO_INCOME"
    UNUSUAL_PATTERN = "UNUSUAL_PATTERN"


@dataclass(frozen=True)
class AnomalyData:
    """One date whose value deviates from the expected baseline.

    Attributes:
        date: Flagged date.
        anomaly_type: Classification.
        actual_value: Observed value for the date.
        expected_value: Baseline value.
        deviation: Relative deviation from the baseline.
        reason: Human-readable explanation.
    """

    date: date
    anomaly_type: AnomalyType
    actual_value: Decimal
    expected_value: Decimal
    deviation: Decimal
    reason: str


@dataclass(frozen=True)
class MonthlyComparison:
    """Month-over-month income comparison.

    Attributes:
        current_month: Current month label.
        current_total: Current month income.
        previous_month: Previous month label.
        previous_total: Previous month income.
        growth_percentage: Relative growth, 0 when previous total is 0.
        growth_amount: Absolute growth.
    """

    current_month: str
    current_total: Decimal
    previous_month: str
    previous_total: Decimal
    growth_percentage: Decimal
    growth_amount: Decimal


@dataclass(frozen=True)
class ProjectionData:
    """End-of-month income projection from partial-month data.

    Attributes:
        current_month_total: Income so far this month.
        projected_month_total: Daily average extrapolated to the month length.
        days_elapsed: Days of the month covered by the data.
        total_days_in_month: Calendar length of the month.
        daily_average: Income per elapsed day.
        comparison_to_previous: Projected growth over the previous month, percent.
        active_revenue_days: Distinct dates with non-zero income.
        active_day_average: Income per active revenue day.
    """

    current_month_total: Decimal
    projected_month_total: Decimal
    days_elapsed: int
    total_days_in_month: int
    daily_average: Decimal
    comparison_to_previous: Decimal
    active_revenue_days: int = 0
    active_day_average: Decimal = Decimal("0")


@dataclass(frozen=True)
class AnalyticsData:
    """Top-level analytics view state.

    `error` is set only when the upstream source read fails; it may coexist
    with previously computed facets.
    """

    trend_data: tuple[TrendData, ...] = field(default_factory=tuple)
    driver_performance: tuple[DriverPerformance, ...] = field(default_factory=tuple)
    vehicle_roi: tuple[VehicleROI, ...] = field(default_factory=tuple)
    day_of_week_analysis: tuple[DayOfWeekAnalysis, ...] = field(default_factory=tuple)
    expense_breakdown: tuple[ExpenseBreakdown, ...] = field(default_factory=tuple)
    anomalies: tuple[AnomalyData, ...] = field(default_factory=tuple)
    monthly_comparison: MonthlyComparison | None = None
    projection: ProjectionData | None = None
    is_loading: bool = False
    error: str | None = None


class IncomeLevel(Enum):
    """Daily income bands used for calendar colour coding."""

    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


__all__ = [
    "AnalyticsData",
    "AnomalyData",
    "AnomalyType",
    "DayOfWeekAnalysis",
    "DriverPerformance",
    "ExpenseBreakdown",
    "IncomeLevel",
    "MonthlyComparison",
    "ProjectionData",
    "TrendData",
    "VehicleROI",
]
