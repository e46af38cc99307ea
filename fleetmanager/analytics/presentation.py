"""Display formatting and JSON serialization for analytics values."""

from __future__ import annotations

import calendar
from decimal import ROUND_HALF_UP, Decimal

from .calculator import (
    ANALYTICS_DEFAULT_HIGH_INCOME_THRESHOLD,
    ANALYTICS_DEFAULT_MEDIUM_INCOME_THRESHOLD,
    analytics_income_level,
)
from .cost_metrics import ComprehensiveAnalyticsMetrics
from .models import (
    AnalyticsData,
    AnomalyData,
    DayOfWeekAnalysis,
    DriverPerformance,
    ExpenseBreakdown,
    MonthlyComparison,
    ProjectionData,
    TrendData,
    VehicleROI,
)

_CURRENCY_CODE = "AED"
_CENT = Decimal("0.01")
_RATIO_PLACES = Decimal("0.0001")


def format_currency(amount: Decimal) -> str:
    """Format an amount as `AED 1234.50`."""
    return f"{_CURRENCY_CODE} {amount:.2f}"


def format_percentage(percentage: Decimal) -> str:
    """Format a percentage with one decimal, e.g. `12.5%`."""
    return f"{percentage:.1f}%"


def severity_level(deviation: Decimal) -> str:
    """Map an anomaly deviation ratio to a severity label."""

    if deviation > Decimal("0.8"):
        return "Critical"
    if deviation > Decimal("0.5"):
        return "High"
    if deviation > Decimal("0.3"):
        return "Medium"
    return "Low"


def performance_level(average_income: Decimal) -> str:
    """Map a weekday's average income to a performance label."""

    if average_income >= 300:
        return "Excellent"
    if average_income >= 200:
        return "Good"
    if average_income >= 100:
        return "Average"
    if average_income > 0:
        return "Below Avg"
    return "No Data"


def growth_description(growth_percentage: Decimal) -> str:
    """Describe month-over-month growth in words."""

    if growth_percentage > 20:
        return "Exceptional growth this month!"
    if growth_percentage > 10:
        return "Strong performance improvement"
    if growth_percentage > 5:
        return "Steady growth trend"
    if growth_percentage > 0:
        return "Slight improvement"
    if growth_percentage == 0:
        return "Performance unchanged"
    if growth_percentage > -5:
        return "Minor decline"
    if growth_percentage > -10:
        return "Noticeable decrease"
    if growth_percentage > -20:
        return "Significant decline"
    return "Major performance drop"


def roi_interpretation(roi: Decimal) -> str:
    """Describe a vehicle ROI in words."""

    if roi > 50:
        return "Excellent performance! This vehicle is highly profitable."
    if roi > 20:
        return "Good performance. Strong return on investment."
    if roi > 0:
        return "Positive ROI but room for improvement."
    if roi == 0:
        return "Breaking even. Consider optimizing operations."
    return "Losing money. Immediate attention needed."


def presentation_serialize_analytics(
    analytics_data: AnalyticsData,
    high_income_threshold: Decimal = ANALYTICS_DEFAULT_HIGH_INCOME_THRESHOLD,
    medium_income_threshold: Decimal = ANALYTICS_DEFAULT_MEDIUM_INCOME_THRESHOLD,
) -> dict[str, object]:
    """Serialize analytics view state to a JSON-ready payload.

    Money values are rounded half-up to cents and rendered as strings so the
    payload keeps exact decimal values. Trend points carry an income band.

    Args:
        analytics_data: Analytics view state.
        high_income_threshold: Daily income at or above which a day is HIGH.
        medium_income_threshold: Daily income at or above which a day is MEDIUM.

    Returns:
        dict[str, object]: JSON-serializable payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "trend_data": [
            _serialize_trend(trend, high_income_threshold, medium_income_threshold)
            for trend in analytics_data.trend_data
        ],
        "driver_performance": [_serialize_driver(driver) for driver in analytics_data.driver_performance],
        "vehicle_roi": [_serialize_vehicle(vehicle) for vehicle in analytics_data.vehicle_roi],
        "day_of_week_analysis": [_serialize_weekday(weekday) for weekday in analytics_data.day_of_week_analysis],
        "expense_breakdown": [_serialize_breakdown(row) for row in analytics_data.expense_breakdown],
        "anomalies": [_serialize_anomaly(anomaly) for anomaly in analytics_data.anomalies],
        "monthly_comparison": (
            None
            if analytics_data.monthly_comparison is None
            else _serialize_monthly_comparison(analytics_data.monthly_comparison)
        ),
        "projection": None if analytics_data.projection is None else _serialize_projection(analytics_data.projection),
        "is_loading": analytics_data.is_loading,
        "error": analytics_data.error,
    }


def presentation_serialize_metrics(metrics: ComprehensiveAnalyticsMetrics) -> dict[str, object]:
    """Serialize comprehensive cost metrics to a JSON-ready payload."""

    return {
        "driver_net_income": _money(metrics.driver_net_income),
        "driver_fixed_costs": _money(metrics.driver_fixed_costs),
        "vehicle_cost_ratio": _ratio(metrics.vehicle_cost_ratio),
        "vehicle_fixed_costs": _money(metrics.vehicle_fixed_costs),
        "total_income": _money(metrics.total_income),
        "variable_expenses": _money(metrics.variable_expenses),
        "net_operational_profit": _money(metrics.net_operational_profit),
        "driver_name": metrics.driver_name,
        "vehicle_name": metrics.vehicle_name,
        "has_data": metrics.has_data,
        "total_expenses": _money(metrics.total_expenses),
        "driver_vehicle_cost": _money(metrics.driver_vehicle_cost),
    }


def _money(value: Decimal) -> str:
    return str(value.quantize(_CENT, rounding=ROUND_HALF_UP))


def _ratio(value: Decimal) -> str:
    return str(value.quantize(_RATIO_PLACES, rounding=ROUND_HALF_UP))


def _serialize_trend(trend: TrendData, high_threshold: Decimal, medium_threshold: Decimal) -> dict[str, object]:
    return {
        "date": trend.date.isoformat(),
        "income": _money(trend.income),
        "expenses": _money(trend.expenses),
        "net_profit": _money(trend.net_profit),
        "income_level": analytics_income_level(trend.income, high_threshold, medium_threshold).value,
    }


def _serialize_driver(driver: DriverPerformance) -> dict[str, object]:
    return {
        "driver_name": driver.driver_name,
        "total_revenue": _money(driver.total_revenue),
        "average_revenue_per_day": _money(driver.average_revenue_per_day),
        "active_days": driver.active_days,
        "total_trips": driver.total_trips,
    }


def _serialize_vehicle(vehicle: VehicleROI) -> dict[str, object]:
    return {
        "vehicle_name": vehicle.vehicle_name,
        "total_income": _money(vehicle.total_income),
        "total_expenses": _money(vehicle.total_expenses),
        "net_profit": _money(vehicle.net_profit),
        "roi": _money(vehicle.roi),
        "interpretation": roi_interpretation(vehicle.roi),
    }


def _serialize_weekday(weekday: DayOfWeekAnalysis) -> dict[str, object]:
    return {
        "day_of_week": calendar.day_name[weekday.day_of_week - 1],
        "average_income": _money(weekday.average_income),
        "total_days": weekday.total_days,
        "total_income": _money(weekday.total_income),
        "performance_level": performance_level(weekday.average_income),
    }


def _serialize_breakdown(row: ExpenseBreakdown) -> dict[str, object]:
    return {
        "expense_type": row.expense_type.name,
        "display_name": row.expense_type.display_name,
        "total_amount": _money(row.total_amount),
        "percentage": _money(row.percentage),
        "count": row.count,
    }


def _serialize_anomaly(anomaly: AnomalyData) -> dict[str, object]:
    return {
        "date": anomaly.date.isoformat(),
        "type": anomaly.anomaly_type.value,
        "actual_value": _money(anomaly.actual_value),
        "expected_value": _money(anomaly.expected_value),
        "deviation": _money(anomaly.deviation),
        "severity": severity_level(anomaly.deviation),
        "reason": anomaly.reason,
    }


def _serialize_monthly_comparison(comparison: MonthlyComparison) -> dict[str, object]:
    return {
        "current_month": comparison.current_month,
        "current_total": _money(comparison.current_total),
        "previous_month": comparison.previous_month,
        "previous_total": _money(comparison.previous_total),
        "growth_percentage": _money(comparison.growth_percentage),
        "growth_amount": _money(comparison.growth_amount),
        "description": growth_description(comparison.growth_percentage),
    }


def _serialize_projection(projection: ProjectionData) -> dict[str, object]:
    return {
        "current_month_total": _money(projection.current_month_total),
        "projected_month_total": _money(projection.projected_month_total),
        "days_elapsed": projection.days_elapsed,
        "total_days_in_month": projection.total_days_in_month,
        "daily_average": _money(projection.daily_average),
        "comparison_to_previous": _money(projection.comparison_to_previous),
        "active_revenue_days": projection.active_revenue_days,
        "active_day_average": _money(projection.active_day_average),
    }


__all__ = [
    "format_currency",
    "format_percentage",
    "growth_description",
    "performance_level",
    "presentation_serialize_analytics",
    "presentation_serialize_metrics",
    "roi_interpretation",
    "severity_level",
]
